import math
from typing import TYPE_CHECKING, Collection, Optional

if TYPE_CHECKING:  # pragma: no cover - typing only
    from .ir import Diagram, Edge, EdgeStyle, Ellipse, Label, Point

EDGE_KINDS = ('straight', 'curve')
STROKE_KINDS = ('solid', 'dashed', 'dotted', 'wavy', 'spring')
ARROW_STYLES = ('none', 'forward', 'backward', 'both', 'mid-forward', 'mid-backward', 'mid-cross')
ANCHORS = ('start', 'mid', 'end')

MIN_ELLIPSE_RADIUS = 1.0
# keeps two-decimal text coordinates a fixed point when read back
MAX_MAGNITUDE = 1e9


class ValidationError(Exception):
    pass


def _is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _ensure_vec(value, where: str, what: str) -> None:
    if not isinstance(value, (tuple, list)) or len(value) != 2:
        raise ValidationError(f'{where}: {what} must be an (x, y) pair, got {value!r}')
    for c in value:
        if not _is_number(c) or not math.isfinite(c):
            raise ValidationError(f'{where}: {what} must be finite, got {value!r}')
        if abs(c) > MAX_MAGNITUDE:
            raise ValidationError(f'{where}: {what} exceeds {MAX_MAGNITUDE:g} in magnitude, got {value!r}')


def _ensure_positive(value, where: str, what: str, floor: float = 0.0) -> None:
    if not _is_number(value) or not math.isfinite(value):
        raise ValidationError(f'{where}: {what} must be a finite number, got {value!r}')
    if value > MAX_MAGNITUDE:
        raise ValidationError(f'{where}: {what} exceeds {MAX_MAGNITUDE:g}, got {value!r}')
    if floor > 0.0:
        if value < floor:
            raise ValidationError(f'{where}: {what} must be at least {floor}, got {value!r}')
    elif value <= 0:
        raise ValidationError(f'{where}: {what} must be positive, got {value!r}')


def _ensure_color(value, where: str) -> None:
    if not isinstance(value, (tuple, list)) or len(value) != 3:
        raise ValidationError(f'{where}: color must be an RGB triple, got {value!r}')
    for c in value:
        if not isinstance(c, int) or isinstance(c, bool) or not 0 <= c <= 255:
            raise ValidationError(f'{where}: color components must be integers in 0..255, got {value!r}')


def braces_balanced(text: str) -> bool:
    depth = 0
    escaped = False
    for ch in text:
        if escaped:
            escaped = False
            continue
        if ch == '\\':
            escaped = True
        elif ch == '{':
            depth += 1
        elif ch == '}':
            depth -= 1
            if depth < 0:
                return False
    return depth == 0


def check_point(point: 'Point') -> None:
    where = f'point #{point.id}'
    _ensure_vec(point.position, where, 'position')
    _ensure_positive(point.radius, where, 'radius')


def check_style(style: 'EdgeStyle', where: str) -> None:
    if style.stroke_kind not in STROKE_KINDS:
        raise ValidationError(f'{where}: unknown stroke kind {style.stroke_kind!r}')
    if style.arrow not in ARROW_STYLES:
        raise ValidationError(f'{where}: unknown arrow style {style.arrow!r}')
    _ensure_color(style.color, where)
    _ensure_positive(style.stroke_width, where, 'stroke width')


def check_edge(edge: 'Edge') -> None:
    where = f'edge #{edge.id}'
    if edge.kind not in EDGE_KINDS:
        raise ValidationError(f'{where}: kind must be straight|curve, got {edge.kind!r}')
    _ensure_vec(edge.start, where, 'start')
    _ensure_vec(edge.end, where, 'end')
    if edge.kind == 'curve':
        if edge.control is None:
            raise ValidationError(f'{where}: curve edge requires a control point')
        _ensure_vec(edge.control, where, 'control')
    elif edge.control is not None:
        raise ValidationError(f'{where}: straight edge must not carry a control point')
    check_style(edge.style, where)


def check_ellipse(ellipse: 'Ellipse') -> None:
    where = f'ellipse #{ellipse.id}'
    _ensure_vec(ellipse.center, where, 'center')
    _ensure_positive(ellipse.rx, where, 'rx', floor=MIN_ELLIPSE_RADIUS)
    _ensure_positive(ellipse.ry, where, 'ry', floor=MIN_ELLIPSE_RADIUS)
    _ensure_color(ellipse.color, where)
    _ensure_positive(ellipse.stroke_width, where, 'stroke width')


def check_label(label: 'Label', edge_ids: Optional[Collection[int]] = None) -> None:
    where = f'label #{label.id}'
    _ensure_vec(label.position, where, 'position')
    if not isinstance(label.text, str):
        raise ValidationError(f'{where}: text must be a string')
    if '\n' in label.text or '\r' in label.text:
        raise ValidationError(f'{where}: text must be a single line')
    if not braces_balanced(label.text):
        raise ValidationError(f'{where}: text has unbalanced braces')
    if (len(label.text) - len(label.text.rstrip('\\'))) % 2 == 1:
        raise ValidationError(f'{where}: text must not end with a dangling backslash')
    binding = label.binding
    if binding is None:
        return
    if binding.anchor not in ANCHORS:
        raise ValidationError(f'{where}: anchor must be start|mid|end, got {binding.anchor!r}')
    _ensure_vec(binding.offset, where, 'binding offset')
    if edge_ids is not None and binding.target_edge_id not in edge_ids:
        raise ValidationError(f'{where}: bound to missing edge #{binding.target_edge_id}')


def validate(diagram: 'Diagram') -> None:
    """Check every invariant of a whole diagram snapshot."""

    seen = set()
    for collection in (diagram.points, diagram.edges, diagram.ellipses, diagram.labels):
        for key, element in collection.items():
            if key != element.id:
                raise ValidationError(f'element #{element.id} stored under id {key}')
            if element.id in seen:
                raise ValidationError(f'duplicate id {element.id}')
            seen.add(element.id)

    if seen and max(seen) >= diagram.ids.peek():
        raise ValidationError(f'id allocator at {diagram.ids.peek()} would reuse id {max(seen)}')

    for point in diagram.points.values():
        check_point(point)
    for edge in diagram.edges.values():
        check_edge(edge)
    for ellipse in diagram.ellipses.values():
        check_ellipse(ellipse)
    edge_ids = set(diagram.edges)
    for label in diagram.labels.values():
        check_label(label, edge_ids)
