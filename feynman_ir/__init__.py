from .ir import (
    Diagram,
    Edge,
    EdgeStyle,
    Ellipse,
    IdAllocator,
    Label,
    LabelBinding,
    Point,
    anchor_point,
)
from .validate import validate, ValidationError
from .lexer import ParseFailure
from .parser import parse_diagram, parse_document, build_diagram
from .printer import print_diagram, format_element
from .paths import (
    angle_at,
    build_polyline,
    markers_for_edge,
    point_at,
    Arrowhead,
    CrossTicks,
)
from .geometry import evaluate_cubic, tangent_cubic
from .tikz_codegen import generate_tikz_code, generate_tikz_document, to_editor_space, to_text_units
from .session import DiagramSession
from .config import CodecConfig, StrokeConfig, get_codec_config, set_codec_config, get_stroke_config, set_stroke_config
from .reference import GRAMMAR

serialize = generate_tikz_document
parse = parse_diagram

__all__ = [
    'Diagram',
    'Edge',
    'EdgeStyle',
    'Ellipse',
    'IdAllocator',
    'Label',
    'LabelBinding',
    'Point',
    'anchor_point',
    'validate',
    'ValidationError',
    'ParseFailure',
    'parse',
    'parse_diagram',
    'parse_document',
    'build_diagram',
    'serialize',
    'generate_tikz_code',
    'generate_tikz_document',
    'to_editor_space',
    'to_text_units',
    'print_diagram',
    'format_element',
    'angle_at',
    'build_polyline',
    'markers_for_edge',
    'point_at',
    'Arrowhead',
    'CrossTicks',
    'evaluate_cubic',
    'tangent_cubic',
    'DiagramSession',
    'CodecConfig',
    'StrokeConfig',
    'get_codec_config',
    'set_codec_config',
    'get_stroke_config',
    'set_stroke_config',
    'GRAMMAR',
]
