"""In-memory model of a Feynman diagram.

All coordinates are editor space: origin top-left, +y down.
"""

from __future__ import annotations

import copy
import logging
from dataclasses import dataclass, field, replace
from typing import ClassVar, Dict, Iterator, Optional, Tuple, Union

from .geometry import Vec2, vec_add, vec_sub
from .paths import anchor_t, default_curve_control, point_at
from .validate import (
    ANCHORS,
    ARROW_STYLES,
    EDGE_KINDS,
    STROKE_KINDS,
    ValidationError,
    check_edge,
    check_ellipse,
    check_label,
    check_point,
)

logger = logging.getLogger(__name__)

Color = Tuple[int, int, int]

BLACK: Color = (0, 0, 0)


@dataclass
class EdgeStyle:
    stroke_kind: str = 'solid'
    color: Color = BLACK
    stroke_width: float = 2.0
    arrow: str = 'none'


@dataclass
class Point:
    id: int
    position: Vec2
    radius: float = 3.0
    element_kind: ClassVar[str] = 'point'


@dataclass
class Edge:
    id: int
    kind: str
    start: Vec2
    end: Vec2
    control: Optional[Vec2] = None
    style: EdgeStyle = field(default_factory=EdgeStyle)
    element_kind: ClassVar[str] = 'edge'


@dataclass
class Ellipse:
    id: int
    center: Vec2
    rx: float
    ry: float
    color: Color = BLACK
    stroke_width: float = 2.0
    element_kind: ClassVar[str] = 'ellipse'


@dataclass
class LabelBinding:
    target_edge_id: int
    anchor: str = 'mid'
    offset: Vec2 = (0.0, 0.0)


@dataclass
class Label:
    """Math-markup label.

    ``position`` always holds the last resolved absolute position; while
    ``binding`` is set the authoritative position is the edge anchor plus
    the binding offset.
    """

    id: int
    position: Vec2
    text: str
    binding: Optional[LabelBinding] = None
    element_kind: ClassVar[str] = 'label'


Element = Union[Point, Edge, Ellipse, Label]


class IdAllocator:
    """Monotonic id source shared by every element kind of a diagram."""

    def __init__(self, next_id: int = 1):
        self._next = next_id

    def peek(self) -> int:
        return self._next

    def allocate(self) -> int:
        value = self._next
        self._next += 1
        return value

    def reserve(self, max_id: int) -> None:
        """Make sure ids up to ``max_id`` are never handed out again."""
        self._next = max(self._next, max_id + 1)

    def __repr__(self) -> str:
        return f'IdAllocator(next_id={self._next})'


def _vec(value) -> Vec2:
    return (value[0], value[1])


def anchor_point(edge: Edge, anchor: str) -> Vec2:
    return point_at(edge, anchor_t(anchor))


@dataclass
class Diagram:
    points: Dict[int, Point] = field(default_factory=dict)
    edges: Dict[int, Edge] = field(default_factory=dict)
    ellipses: Dict[int, Ellipse] = field(default_factory=dict)
    labels: Dict[int, Label] = field(default_factory=dict)
    ids: IdAllocator = field(default_factory=IdAllocator)

    # -- creation -------------------------------------------------------

    def create_point(self, position: Vec2, radius: float = 3.0) -> Point:
        point = Point(self.ids.peek(), _vec(position), radius)
        check_point(point)
        self.ids.allocate()
        self.points[point.id] = point
        return point

    def create_edge(
        self,
        kind: str,
        start: Vec2,
        end: Vec2,
        control: Optional[Vec2] = None,
        style: Optional[EdgeStyle] = None,
    ) -> Edge:
        if kind == 'curve' and control is None:
            control = default_curve_control(start, end)
        edge = Edge(
            self.ids.peek(),
            kind,
            _vec(start),
            _vec(end),
            _vec(control) if control is not None else None,
            replace(style) if style is not None else EdgeStyle(),
        )
        check_edge(edge)
        self.ids.allocate()
        self.edges[edge.id] = edge
        return edge

    def create_ellipse(
        self,
        center: Vec2,
        rx: float,
        ry: float,
        color: Color = BLACK,
        stroke_width: float = 2.0,
    ) -> Ellipse:
        ellipse = Ellipse(self.ids.peek(), _vec(center), rx, ry, tuple(color), stroke_width)
        check_ellipse(ellipse)
        self.ids.allocate()
        self.ellipses[ellipse.id] = ellipse
        return ellipse

    def create_label(self, position: Vec2, text: str, binding: Optional[LabelBinding] = None) -> Label:
        label = Label(self.ids.peek(), _vec(position), text, replace(binding) if binding else None)
        check_label(label, self.edges)
        if label.binding is not None:
            label.position = self.resolve_label_position(label)
        self.ids.allocate()
        self.labels[label.id] = label
        return label

    # -- lookup ---------------------------------------------------------

    def _collection_of(self, element_id: int) -> Dict[int, Element]:
        for collection in (self.points, self.edges, self.ellipses, self.labels):
            if element_id in collection:
                return collection
        raise KeyError(element_id)

    def get(self, element_id: int) -> Element:
        return self._collection_of(element_id)[element_id]

    def elements(self) -> Iterator[Element]:
        yield from self.points.values()
        yield from self.edges.values()
        yield from self.ellipses.values()
        yield from self.labels.values()

    def max_id(self) -> int:
        return max((element.id for element in self.elements()), default=0)

    def is_empty(self) -> bool:
        return not (self.points or self.edges or self.ellipses or self.labels)

    # -- anchors --------------------------------------------------------

    def anchor_point(self, edge: Edge, anchor: str) -> Vec2:
        return anchor_point(edge, anchor)

    def resolve_label_position(self, label: Label) -> Vec2:
        binding = label.binding
        if binding is None:
            return label.position
        edge = self.edges.get(binding.target_edge_id)
        if edge is None:
            return label.position
        return vec_add(anchor_point(edge, binding.anchor), binding.offset)

    def _labels_bound_to(self, edge_id: int):
        return [
            label for label in self.labels.values()
            if label.binding is not None and label.binding.target_edge_id == edge_id
        ]

    # -- mutation -------------------------------------------------------

    def delete_by_id(self, element_id: int) -> Element:
        """Remove an element; labels bound to a deleted edge become unbound in place."""

        collection = self._collection_of(element_id)
        element = collection[element_id]
        if isinstance(element, Edge):
            for label in self._labels_bound_to(element_id):
                label.position = self.resolve_label_position(label)
                label.binding = None
                logger.info('Label #%d unbound from deleted edge #%d', label.id, element_id)
        del collection[element_id]
        return element

    def update_edge(self, edge_id: int, **changes) -> Edge:
        edge = self.edges[edge_id]
        unknown = set(changes) - {'kind', 'start', 'end', 'control', 'style'}
        if unknown:
            raise ValidationError(f'edge #{edge_id}: cannot update {sorted(unknown)}')
        if changes.get('kind') == 'straight' and 'control' not in changes:
            changes['control'] = None
        for key in ('start', 'end', 'control'):
            if changes.get(key) is not None:
                changes[key] = _vec(changes[key])
        updated = replace(edge, **changes)
        if updated.kind == 'curve' and updated.control is None:
            updated.control = default_curve_control(updated.start, updated.end)
        if 'style' in changes:
            updated.style = replace(changes['style'])
        check_edge(updated)
        self.edges[edge_id] = updated
        for label in self._labels_bound_to(edge_id):
            label.position = self.resolve_label_position(label)
        return updated

    def move_label(self, label_id: int, position: Vec2) -> Label:
        label = self.labels[label_id]
        moved = replace(label, position=_vec(position))
        if label.binding is not None:
            edge = self.edges[label.binding.target_edge_id]
            offset = vec_sub(moved.position, anchor_point(edge, label.binding.anchor))
            moved.binding = replace(label.binding, offset=offset)
        check_label(moved, self.edges)
        self.labels[label_id] = moved
        return moved

    def bind_label(
        self,
        label_id: int,
        edge_id: int,
        anchor: str = 'mid',
        offset: Optional[Vec2] = None,
    ) -> Label:
        label = self.labels[label_id]
        if edge_id not in self.edges:
            raise ValidationError(f'label #{label_id}: cannot bind to missing edge #{edge_id}')
        if anchor not in ANCHORS:
            raise ValidationError(f'label #{label_id}: anchor must be start|mid|end, got {anchor!r}')
        edge = self.edges[edge_id]
        if offset is None:
            offset = vec_sub(label.position, anchor_point(edge, anchor))
        bound = replace(label, binding=LabelBinding(edge_id, anchor, _vec(offset)))
        check_label(bound, self.edges)
        bound.position = self.resolve_label_position(bound)
        self.labels[label_id] = bound
        return bound

    def unbind_label(self, label_id: int) -> Label:
        label = self.labels[label_id]
        label.position = self.resolve_label_position(label)
        label.binding = None
        return label

    def clear(self) -> None:
        """Drop every element; the id allocator keeps counting."""
        self.points.clear()
        self.edges.clear()
        self.ellipses.clear()
        self.labels.clear()

    def snapshot(self) -> 'Diagram':
        return copy.deepcopy(self)


__all__ = [
    'ANCHORS',
    'ARROW_STYLES',
    'EDGE_KINDS',
    'STROKE_KINDS',
    'BLACK',
    'Color',
    'Diagram',
    'Edge',
    'EdgeStyle',
    'Element',
    'Ellipse',
    'IdAllocator',
    'Label',
    'LabelBinding',
    'Point',
    'anchor_point',
]
