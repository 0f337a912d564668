import math

import pytest

from feynman_ir import Diagram, EdgeStyle, ValidationError, validate
from feynman_ir.ir import Edge, Ellipse, Label, LabelBinding, Point
from feynman_ir.validate import braces_balanced, check_edge, check_ellipse, check_label, check_point


def expect_invalid(fn, *args, match=None):
    with pytest.raises(ValidationError, match=match):
        fn(*args)


def test_empty_diagram_is_valid():
    validate(Diagram())


def test_point_radius_must_be_positive():
    expect_invalid(check_point, Point(1, (0.0, 0.0), 0.0), match='radius')


@pytest.mark.parametrize('position', [(math.nan, 0.0), (0.0, math.inf), (1.0,), 'xy'])
def test_point_position_must_be_finite_pair(position):
    expect_invalid(check_point, Point(1, position))


def test_curve_requires_control():
    expect_invalid(check_edge, Edge(2, 'curve', (0.0, 0.0), (1.0, 0.0)), match='control')


def test_straight_forbids_control():
    expect_invalid(check_edge, Edge(2, 'straight', (0.0, 0.0), (1.0, 0.0), (0.5, 0.5)), match='control')


@pytest.mark.parametrize(
    'style',
    [
        EdgeStyle(stroke_kind='zigzag'),
        EdgeStyle(arrow='sideways'),
        EdgeStyle(color=(0, 0, 256)),
        EdgeStyle(color=(0.5, 0, 0)),
        EdgeStyle(stroke_width=0.0),
        EdgeStyle(stroke_width=math.inf),
    ],
)
def test_edge_style_checks(style):
    expect_invalid(check_edge, Edge(2, 'straight', (0.0, 0.0), (1.0, 0.0), style=style))


def test_unknown_edge_kind():
    expect_invalid(check_edge, Edge(2, 'arc', (0.0, 0.0), (1.0, 0.0)), match='edge #2')


def test_ellipse_radii_floor():
    check_ellipse(Ellipse(3, (0.0, 0.0), 1.0, 1.0))
    expect_invalid(check_ellipse, Ellipse(3, (0.0, 0.0), 0.99, 5.0), match='rx')
    expect_invalid(check_ellipse, Ellipse(3, (0.0, 0.0), 5.0, -2.0), match='ry')


def test_label_text_must_be_single_line():
    expect_invalid(check_label, Label(4, (0.0, 0.0), 'a\nb'), match='single line')


@pytest.mark.parametrize('text', ['\\frac{1}{2', '}{', 'a}'])
def test_label_text_braces_must_balance(text):
    expect_invalid(check_label, Label(4, (0.0, 0.0), text), match='braces')


def test_braces_balanced_honours_escapes():
    assert braces_balanced(r'\{ x')
    assert braces_balanced(r'\frac{a}{b}')
    assert not braces_balanced('{')


def test_label_binding_must_target_existing_edge():
    label = Label(4, (0.0, 0.0), 'x', LabelBinding(9))
    expect_invalid(check_label, label, set(), match='missing edge #9')


def test_label_binding_anchor():
    label = Label(4, (0.0, 0.0), 'x', LabelBinding(2, 'quarter'))
    expect_invalid(check_label, label, {2}, match='anchor')


def test_validate_detects_duplicate_ids():
    diagram = Diagram()
    diagram.create_point((0.0, 0.0))
    diagram.labels[1] = Label(1, (0.0, 0.0), 'x')
    expect_invalid(validate, diagram, match='duplicate id 1')


def test_validate_detects_stale_allocator():
    diagram = Diagram()
    diagram.points[7] = Point(7, (0.0, 0.0))
    expect_invalid(validate, diagram, match='reuse id 7')
    diagram.ids.reserve(7)
    validate(diagram)


def test_validate_detects_misfiled_element():
    diagram = Diagram()
    diagram.points[2] = Point(1, (0.0, 0.0))
    diagram.ids.reserve(2)
    expect_invalid(validate, diagram, match='stored under id 2')


@pytest.mark.parametrize('text', ['x\\', 'a \\\\\\', '\\'])
def test_label_text_must_not_end_with_dangling_backslash(text):
    expect_invalid(check_label, Label(4, (0.0, 0.0), text), match='dangling backslash')


@pytest.mark.parametrize('text', ['a \\\\', 'x\\$', 'x\\ '])
def test_label_text_with_escaped_ending_is_valid(text):
    check_label(Label(4, (0.0, 0.0), text))


def test_coordinates_beyond_magnitude_bound_are_rejected():
    expect_invalid(check_point, Point(1, (6.6e14, 0.0)), match='exceeds')
    expect_invalid(check_ellipse, Ellipse(3, (0.0, 0.0), 2e9, 5.0), match='rx exceeds')
    check_point(Point(1, (-1e9, 1e9)))
