"""TikZ subset -> Diagram IR.

Parsing happens in two stages. :func:`parse_document` turns every line into
a :class:`Stmt` (or fails on the first line that matches none of the
accepted shapes); :func:`build_diagram` then constructs a fresh
:class:`Diagram` from the statements. Nothing is handed back to the caller
unless both stages succeed.
"""

import logging
import math
import re
from typing import List, Optional, Tuple

from .ast import Document, Span, Stmt
from .attrs import arrow_from_comment, is_arrow_comment, parse_draw_attrs
from .config import CodecConfig, get_codec_config
from .ir import Diagram, EdgeStyle
from .lexer import ParseFailure, Token, tokenize_line
from .tikz_codegen.utils import strip_math_delimiters, to_editor_space
from .validate import ValidationError

logger = logging.getLogger(__name__)

_ERROR_LOC_RE = re.compile(r"\[line (\d+), col (\d+)\]")

PICTURE_ENV = 'tikzpicture'


class Cursor:
    def __init__(self, tokens: List[Token]):
        self.toks = tokens
        self.i = 0

    def peek(self):
        return self.toks[self.i] if self.i < len(self.toks) else None

    def match(self, *types: str):
        if self.i < len(self.toks) and self.toks[self.i][0] in types:
            t = self.toks[self.i]
            self.i += 1
            return t
        return None

    def expect(self, *types: str):
        t = self.peek()
        if t and t[0] in types:
            self.i += 1
            return t
        want = '|'.join(types)
        if t:
            raise ParseFailure(f'[line {t[2]}, col {t[3]}] expected {want}, got {t[0]} {t[1]!r}')
        raise ParseFailure(f'Unexpected end of line: expected {want}')

    def expect_word(self, word: str):
        t = self.expect('ID')
        if t[1] != word:
            raise ParseFailure(f"[line {t[2]}, col {t[3]}] expected '{word}', got '{t[1]}'")
        return t


def parse_number(tok: Token) -> float:
    value = float(tok[1])
    if not math.isfinite(value):
        raise ParseFailure(f'[line {tok[2]}, col {tok[3]}] number {tok[1]!r} is not finite')
    return value


def parse_coord(cur: Cursor, config: CodecConfig) -> Tuple[float, float]:
    """``(x, y)`` in text units, returned in editor space."""
    lp = cur.expect('LPAREN')
    x = parse_number(cur.expect('NUMBER'))
    cur.expect('COMMA')
    y = parse_number(cur.expect('NUMBER'))
    cur.expect('RPAREN')
    ex, ey = to_editor_space((x, y), config)
    if not (math.isfinite(ex) and math.isfinite(ey)):
        raise ParseFailure(f'[line {lp[2]}, col {lp[3]}] coordinate out of range')
    return ex, ey


def parse_length(cur: Cursor, config: CodecConfig) -> float:
    tok = cur.expect('NUMBER')
    value = parse_number(tok) * config.scale
    if not math.isfinite(value):
        raise ParseFailure(f'[line {tok[2]}, col {tok[3]}] length out of range')
    return value


def _parse_fill(cur: Cursor, t0: Token, config: CodecConfig) -> Stmt:
    position = parse_coord(cur, config)
    cur.expect_word('circle')
    cur.expect('LPAREN')
    radius = parse_length(cur, config)
    cur.expect('RPAREN')
    return Stmt('point', Span(t0[2], t0[3]), {'position': position, 'radius': radius})


def _parse_draw(cur: Cursor, t0: Token, config: CodecConfig) -> Stmt:
    span = Span(t0[2], t0[3])
    attrs_tok = cur.match('ATTRS')
    raw_attrs = attrs_tok[1] if attrs_tok else ''
    start = parse_coord(cur, config)

    if cur.match('DASHDASH'):
        end = parse_coord(cur, config)
        return Stmt('edge', span, {'kind': 'straight', 'start': start, 'end': end, 'attrs': raw_attrs})

    if cur.match('DOTDOT'):
        cur.expect_word('controls')
        control = parse_coord(cur, config)
        cur.expect('DOTDOT')
        end = parse_coord(cur, config)
        return Stmt(
            'edge',
            span,
            {'kind': 'curve', 'start': start, 'end': end, 'control': control, 'attrs': raw_attrs},
        )

    t = cur.peek()
    if t and t[0] == 'ID' and t[1] == 'ellipse':
        cur.i += 1
        cur.expect('LPAREN')
        rx = parse_length(cur, config)
        cur.expect_word('and')
        ry = parse_length(cur, config)
        cur.expect('RPAREN')
        return Stmt('ellipse', span, {'center': start, 'rx': rx, 'ry': ry, 'attrs': raw_attrs})

    if t:
        raise ParseFailure(f"[line {t[2]}, col {t[3]}] expected '--', '.. controls' or 'ellipse'")
    raise ParseFailure(f'[line {t0[2]}, col {t0[3]}] unterminated \\draw statement')


def _parse_node(cur: Cursor, t0: Token, config: CodecConfig) -> Stmt:
    cur.expect_word('at')
    position = parse_coord(cur, config)
    group = cur.expect('GROUP')
    text = strip_math_delimiters(group[1])
    return Stmt('label', Span(t0[2], t0[3]), {'position': position, 'text': text})


def _parse_environment(cur: Cursor, t0: Token) -> Stmt:
    group = cur.expect('GROUP')
    if group[1].strip() != PICTURE_ENV:
        raise ParseFailure(f"[line {group[2]}, col {group[3]}] only the '{PICTURE_ENV}' environment is supported")
    if t0[1] == 'begin':
        cur.match('ATTRS')
    return Stmt(t0[1], Span(t0[2], t0[3]))


def parse_statement(tokens: List[Token], config: Optional[CodecConfig] = None) -> Optional[Stmt]:
    """Parse one tokenized line; returns None for blank and comment-only lines."""
    cfg = config or get_codec_config()
    if not tokens or tokens[0][0] == 'COMMENT':
        return None
    cur = Cursor(tokens)
    t0 = cur.expect('CMD')
    cmd = t0[1]

    if cmd == 'fill':
        stmt = _parse_fill(cur, t0, cfg)
    elif cmd == 'draw':
        stmt = _parse_draw(cur, t0, cfg)
    elif cmd == 'node':
        stmt = _parse_node(cur, t0, cfg)
    elif cmd in ('begin', 'end'):
        stmt = _parse_environment(cur, t0)
    else:
        raise ParseFailure(f'[line {t0[2]}, col {t0[3]}] unsupported command "\\{cmd}"')

    if stmt.kind not in ('begin', 'end'):
        cur.expect('SEMI')
    comment = cur.match('COMMENT')
    if comment:
        stmt.comment = comment[1]
    trailing = cur.peek()
    if trailing:
        raise ParseFailure(f"[line {trailing[2]}, col {trailing[3]}] unexpected token {trailing[1]!r}")
    return stmt


def _augment_syntax_error(err: SyntaxError, line_text: str) -> Optional[ParseFailure]:
    message = str(err)
    if not line_text or "\n" in message:
        return None
    match = _ERROR_LOC_RE.search(message)
    if not match:
        return None
    col = max(int(match.group(2)), 1)
    caret_line = " " * (col - 1) + "^"
    snippet = f"    {line_text.rstrip()}\n    {caret_line}"
    return ParseFailure(f"{message}\n{snippet}")


def parse_document(text: str, config: Optional[CodecConfig] = None) -> Document:
    cfg = config or get_codec_config()
    doc = Document()
    previous: Optional[Stmt] = None
    for i, raw in enumerate(text.splitlines(), start=1):
        try:
            tokens = tokenize_line(raw, i)
            stmt = parse_statement(tokens, cfg)
        except ParseFailure as err:
            augmented = _augment_syntax_error(err, raw)
            if augmented is None:
                raise
            raise augmented from None

        if stmt is None:
            if tokens and previous is not None and is_arrow_comment(tokens[0][1], cfg):
                # an arrow comment on its own line belongs to the edge right above it
                if previous.kind == 'edge' and not is_arrow_comment(previous.comment, cfg):
                    previous.comment = tokens[0][1]
            previous = None
            continue
        doc.stmts.append(stmt)
        previous = stmt
        logger.debug('line %d: %s', i, stmt.kind)
    return doc


def _edge_style(stmt: Stmt, config: CodecConfig) -> EdgeStyle:
    attrs = parse_draw_attrs(stmt.data['attrs'], config)
    arrow = attrs.arrow
    if stmt.comment:
        override = arrow_from_comment(stmt.comment, config)
        if override is not None:
            arrow = override
    return EdgeStyle(attrs.stroke_kind, attrs.color, attrs.stroke_width, arrow)


def build_diagram(doc: Document, config: Optional[CodecConfig] = None) -> Diagram:
    """Construct a new diagram from parsed statements: points, edges, ellipses, labels."""
    cfg = config or get_codec_config()
    diagram = Diagram()
    stmt: Optional[Stmt] = None
    try:
        for stmt in doc.of_kind('point'):
            diagram.create_point(stmt.data['position'], stmt.data['radius'])
        for stmt in doc.of_kind('edge'):
            diagram.create_edge(
                stmt.data['kind'],
                stmt.data['start'],
                stmt.data['end'],
                stmt.data.get('control'),
                _edge_style(stmt, cfg),
            )
        for stmt in doc.of_kind('ellipse'):
            attrs = parse_draw_attrs(stmt.data['attrs'], cfg)
            diagram.create_ellipse(
                stmt.data['center'], stmt.data['rx'], stmt.data['ry'], attrs.color, attrs.stroke_width
            )
        for stmt in doc.of_kind('label'):
            diagram.create_label(stmt.data['position'], stmt.data['text'])
    except (ValidationError, ValueError) as exc:
        where = f'[line {stmt.span.line}, col {stmt.span.col}] ' if stmt is not None else ''
        raise ParseFailure(f'{where}{exc}') from exc

    diagram.ids.reserve(diagram.max_id())
    return diagram


def parse_diagram(text: str, config: Optional[CodecConfig] = None) -> Diagram:
    """Parse a TikZ subset document into a new diagram or raise :class:`ParseFailure`."""
    doc = parse_document(text, config)
    diagram = build_diagram(doc, config)
    logger.info(
        "Parsed %d point(s), %d edge(s), %d ellipse(s), %d label(s)",
        len(diagram.points),
        len(diagram.edges),
        len(diagram.ellipses),
        len(diagram.labels),
    )
    return diagram


__all__ = ['ParseFailure', 'parse_diagram', 'parse_document', 'parse_statement', 'build_diagram']
