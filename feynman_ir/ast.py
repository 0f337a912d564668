from dataclasses import dataclass, field
from typing import Any, Dict, List


@dataclass
class Span:
    line: int
    col: int


@dataclass
class Stmt:
    kind: str  # 'point' | 'edge' | 'ellipse' | 'label' | 'begin' | 'end'
    span: Span
    data: Dict[str, Any] = field(default_factory=dict)
    comment: str = ''


@dataclass
class Document:
    stmts: List[Stmt] = field(default_factory=list)

    def of_kind(self, kind: str) -> List[Stmt]:
        return [stmt for stmt in self.stmts if stmt.kind == kind]
