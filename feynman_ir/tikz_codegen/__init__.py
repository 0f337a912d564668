"""Diagram IR → TikZ subset serialization."""

from .generator import (
    generate_tikz_code,
    generate_tikz_document,
    line_style_attrs,
)
from .utils import (
    strip_math_delimiters,
    tikz_color,
    to_editor_space,
    to_text_units,
)

__all__ = [
    "generate_tikz_code",
    "generate_tikz_document",
    "line_style_attrs",
    "strip_math_delimiters",
    "tikz_color",
    "to_editor_space",
    "to_text_units",
]
