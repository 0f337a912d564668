import logging

import pytest

from feynman_ir.attrs import (
    arrow_from_comment,
    is_arrow_comment,
    native_arrow,
    parse_draw_attrs,
    split_attrs,
)


def test_split_attrs_respects_nesting():
    raw = 'draw={rgb,255:red,1;green,2;blue,3}, line width=1.00pt, decoration={snake, amplitude=2pt}'
    assert split_attrs(raw) == [
        'draw={rgb,255:red,1;green,2;blue,3}',
        'line width=1.00pt',
        'decoration={snake, amplitude=2pt}',
    ]


def test_split_attrs_drops_empty_entries():
    assert split_attrs(' dashed, , ') == ['dashed']


@pytest.mark.parametrize(
    'entry, arrow',
    [
        ('-{Stealth}', 'forward'),
        ('{Stealth}-', 'backward'),
        ('{Stealth}-{Stealth}', 'both'),
        ('->', 'forward'),
        ('<-', 'backward'),
        ('<->', 'both'),
        ('-latex', 'forward'),
        ('-', 'none'),
        ('line-cap', None),
        ('dashed', None),
    ],
)
def test_native_arrow(entry, arrow):
    assert native_arrow(entry) == arrow


def test_default_attrs():
    attrs = parse_draw_attrs('')
    assert (attrs.stroke_kind, attrs.arrow, attrs.color, attrs.stroke_width) == ('solid', 'none', (0, 0, 0), 2.0)


def test_full_attr_list():
    attrs = parse_draw_attrs(
        'draw={rgb,255:red,200;green,30;blue,0}, line width=1.75pt, decorate, '
        'decoration={coil, segment length=5pt, amplitude=3pt}, {Stealth}-{Stealth}'
    )
    assert attrs.color == (200, 30, 0)
    assert attrs.stroke_width == 3.5
    assert attrs.stroke_kind == 'spring'
    assert attrs.arrow == 'both'


def test_line_width_is_exact_inverse_without_floor():
    assert parse_draw_attrs('line width=0.10pt').stroke_width == pytest.approx(0.2)


@pytest.mark.parametrize('raw', ['line width=thick', 'line width=2mm', 'line width=1e400pt'])
def test_bad_line_width_raises(raw):
    with pytest.raises(ValueError):
        parse_draw_attrs(raw)


def test_named_colors():
    assert parse_draw_attrs('draw=Blue').color == (0, 0, 255)
    assert parse_draw_attrs('color=red').color == (255, 0, 0)


def test_unknown_color_is_ignored(caplog):
    with caplog.at_level(logging.DEBUG, logger='feynman_ir.attrs'):
        attrs = parse_draw_attrs('draw=chartreuse!40')
    assert attrs.color == (0, 0, 0)
    assert 'unsupported color' in caplog.text


@pytest.mark.parametrize(
    'raw, kind',
    [
        ('dashed', 'dashed'),
        ('densely dotted', 'dotted'),
        ('decorate, decoration={snake, segment length=10pt}', 'wavy'),
        ('dotted, dashed', 'dashed'),
        ('dotted, decorate, decoration={snake}', 'dotted'),
        ('decorate, decoration={coil}', 'spring'),
    ],
)
def test_stroke_kind_precedence(raw, kind):
    assert parse_draw_attrs(raw).stroke_kind == kind


def test_unknown_options_are_ignored():
    attrs = parse_draw_attrs('thick, rounded corners, fill=gray!20, opacity=0.5')
    assert attrs.stroke_kind == 'solid'
    assert attrs.arrow == 'none'


def test_markings_postaction_does_not_imply_an_arrow():
    attrs = parse_draw_attrs(
        r'postaction={decorate, decoration={markings, mark=at position 0.5 with {\arrow{Stealth}}}}'
    )
    assert attrs.arrow == 'none'


def test_arrow_comment_recognition():
    assert is_arrow_comment('edge-arrow: mid-forward')
    assert is_arrow_comment('  Edge-Arrow :mid-cross ')
    assert not is_arrow_comment('edge-arrows: mid-cross')
    assert not is_arrow_comment('just a note')
    assert arrow_from_comment('edge-arrow: mid-backward') == 'mid-backward'
    assert arrow_from_comment('just a note') is None


def test_unknown_arrow_comment_warns(caplog):
    with caplog.at_level(logging.WARNING, logger='feynman_ir.attrs'):
        assert arrow_from_comment('edge-arrow: sideways') is None
    assert 'sideways' in caplog.text
