"""Keeps a live diagram and its editable text form in sync."""

from __future__ import annotations

import logging
from typing import Optional

from .config import CodecConfig
from .ir import Diagram
from .parser import parse_diagram
from .tikz_codegen import generate_tikz_document
from .validate import validate

logger = logging.getLogger(__name__)


class DiagramSession:
    """Owner of the live :class:`Diagram` and of the text shown next to it.

    Edits to the text mark the editor dirty; regenerating from the diagram
    only overwrites dirty text when forced. :meth:`apply` replaces the live
    diagram only after a complete, successful parse.
    """

    def __init__(self, diagram: Optional[Diagram] = None, config: Optional[CodecConfig] = None):
        self.config = config
        self.diagram = diagram if diagram is not None else Diagram()
        self.editor_dirty = False
        self.last_generated = ''
        self.text = ''
        self.regenerate(force=True)

    def regenerate(self, force: bool = False) -> str:
        validate(self.diagram)
        generated = generate_tikz_document(self.diagram, self.config)
        self.last_generated = generated
        if force or not self.editor_dirty:
            self.text = generated
            self.editor_dirty = False
        return generated

    def edit_text(self, text: str) -> None:
        self.text = text
        self.editor_dirty = True

    def apply(self, text: Optional[str] = None) -> Diagram:
        """Parse ``text`` (default: the editor text) and make it the live diagram.

        Raises :class:`~feynman_ir.lexer.ParseFailure` without touching the
        live diagram or the editor text.
        """
        source = self.text if text is None else text
        parsed = parse_diagram(source, self.config)
        self.diagram = parsed
        self.editor_dirty = False
        self.regenerate(force=True)
        logger.info("Applied text: %d element(s) now live", sum(1 for _ in parsed.elements()))
        return parsed

    def clear(self) -> None:
        self.diagram.clear()
        self.regenerate(force=True)
