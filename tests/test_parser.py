import logging

import pytest

from feynman_ir import ParseFailure, parse_diagram, parse_document
from feynman_ir.lexer import tokenize_line
from feynman_ir.parser import parse_statement


def parse_single(line):
    stmt = parse_statement(tokenize_line(line, 1))
    assert stmt is not None
    return stmt


def test_point_statement():
    stmt = parse_single(r'\fill (1.00, -2.50) circle (0.15);')
    assert stmt.kind == 'point'
    assert stmt.data['position'] == (20.0, 50.0)
    assert stmt.data['radius'] == pytest.approx(3.0)


def test_straight_edge_statement():
    stmt = parse_single(r'\draw[dashed] (0, 0) -- (5, 1);')
    assert stmt.kind == 'edge'
    assert stmt.data == {'kind': 'straight', 'start': (0.0, -0.0), 'end': (100.0, -20.0), 'attrs': 'dashed'}


def test_curve_edge_statement():
    stmt = parse_single(r'\draw (0, 0) .. controls (2.5, 1) .. (5, 0);')
    assert stmt.data['kind'] == 'curve'
    assert stmt.data['control'] == (50.0, -20.0)
    assert stmt.data['attrs'] == ''


def test_ellipse_statement():
    stmt = parse_single(r'\draw[fill=gray!20] (1, 1) ellipse (1.5 and 0.5);')
    assert stmt.kind == 'ellipse'
    assert stmt.data['center'] == (20.0, -20.0)
    assert (stmt.data['rx'], stmt.data['ry']) == (30.0, 10.0)


@pytest.mark.parametrize(
    'line, text',
    [
        (r'\node at (0, 0) {$e^-$};', 'e^-'),
        (r'\node at (0, 0) { $$\gamma$$ };', r'\gamma'),
        (r'\node at (0, 0) {q};', 'q'),
        (r'\node at (0, 0) {$5\$$};', r'5\$'),
        (r'\node at (0, 0) {};', ''),
    ],
)
def test_label_statement_strips_math_delimiters(line, text):
    stmt = parse_single(line)
    assert stmt.kind == 'label'
    assert stmt.data['text'] == text


def test_blank_and_comment_lines_produce_nothing():
    assert parse_statement(tokenize_line('', 1)) is None
    assert parse_statement(tokenize_line('% just a comment', 1)) is None


def test_trailing_comment_is_attached():
    stmt = parse_single(r'\draw (0, 0) -- (1, 0); % edge-arrow: mid-cross')
    assert stmt.comment == 'edge-arrow: mid-cross'


@pytest.mark.parametrize(
    'line, message',
    [
        (r'\draw (0, 0) -- (1, 0)', 'Unexpected end of line'),
        (r'\draw (0, 0) to (1, 0);', "expected '--', '.. controls' or 'ellipse'"),
        (r'\fill (0, 0) square (1);', "expected 'circle', got 'square'"),
        (r'\path (0, 0) -- (1, 0);', 'unsupported command'),
        (r'\node (0, 0) {x};', 'expected ID'),
        (r'\draw (0, 0) -- (1, 0); \draw (1, 0) -- (2, 0);', "unexpected token 'draw'"),
        (r'\begin{scope}', "only the 'tikzpicture' environment"),
        ('(0, 0) -- (1, 0);', 'expected CMD'),
    ],
)
def test_statement_errors(line, message):
    with pytest.raises(ParseFailure) as excinfo:
        parse_statement(tokenize_line(line, 1))
    assert message in str(excinfo.value)


def test_document_error_reports_column_pointer():
    text = '\\begin{tikzpicture}\n  \\fill (0, 0) square (1);\n\\end{tikzpicture}\n'
    with pytest.raises(ParseFailure) as excinfo:
        parse_diagram(text)
    message = str(excinfo.value)
    assert message.startswith('[line 2, col 16]')
    lines = message.splitlines()
    assert lines[-2].strip() == r'\fill (0, 0) square (1);'
    assert lines[-1].rstrip().endswith('^')
    assert len(lines[-1]) - 4 == 16


def test_wrapper_lines_and_options_are_accepted():
    text = '\n'.join(
        [
            '% header',
            r'\begin{tikzpicture}[scale=1, >=Stealth]',
            r'  \fill (0, 0) circle (0.15);',
            r'\end{tikzpicture}',
        ]
    )
    diagram = parse_diagram(text)
    assert len(diagram.points) == 1


def test_parse_document_keeps_statement_order():
    doc = parse_document('\\node at (0, 0) {a};\n\\fill (0, 0) circle (0.1);\n')
    assert [s.kind for s in doc.stmts] == ['label', 'point']
    assert doc.stmts[1].span.line == 2


def test_elements_are_created_grouped_by_kind():
    text = '\n'.join(
        [
            r'\node at (0, 0) {a};',
            r'\draw (0, 0) ellipse (1 and 1);',
            r'\draw (0, 0) -- (1, 0);',
            r'\fill (0, 0) circle (0.15);',
        ]
    )
    diagram = parse_diagram(text)
    assert list(diagram.points) == [1]
    assert list(diagram.edges) == [2]
    assert list(diagram.ellipses) == [3]
    assert list(diagram.labels) == [4]
    assert diagram.ids.peek() == 5


def test_parsed_edge_style():
    diagram = parse_diagram(
        r'\draw[draw={rgb,255:red,10;green,20;blue,30}, line width=0.75pt, decorate, '
        r'decoration={snake, segment length=10pt, amplitude=2pt}, {Stealth}-] (0, 0) -- (1, 0);'
    )
    (edge,) = diagram.edges.values()
    assert edge.kind == 'straight'
    assert edge.style.color == (10, 20, 30)
    assert edge.style.stroke_width == 1.5
    assert edge.style.stroke_kind == 'wavy'
    assert edge.style.arrow == 'backward'


def test_parsed_ellipse_uses_draw_color_and_width():
    diagram = parse_diagram(r'\draw[fill=gray!20, draw=blue, line width=2.00pt] (0, 0) ellipse (2 and 1);')
    (ellipse,) = diagram.ellipses.values()
    assert ellipse.color == (0, 0, 255)
    assert ellipse.stroke_width == 4.0
    assert (ellipse.rx, ellipse.ry) == (40.0, 20.0)


MARKINGS = r'postaction={decorate, decoration={markings, mark=at position 0.5 with {\arrow{Stealth}}}}'


def test_trailing_arrow_comment_overrides_native_style():
    diagram = parse_diagram(rf'\draw[{MARKINGS}, -{{Stealth}}] (0, 0) -- (1, 0); % edge-arrow: mid-forward')
    (edge,) = diagram.edges.values()
    assert edge.style.arrow == 'mid-forward'


def test_arrow_comment_on_following_line():
    text = '\n'.join(
        [
            rf'\draw[{MARKINGS}] (0, 0) -- (1, 0);',
            '% edge-arrow: mid-backward',
            r'\draw (0, 0) -- (1, 0);',
        ]
    )
    diagram = parse_diagram(text)
    assert [e.style.arrow for e in diagram.edges.values()] == ['mid-backward', 'none']


def test_arrow_comment_must_follow_immediately():
    text = '\n'.join(
        [
            r'\draw (0, 0) -- (1, 0);',
            '',
            '% edge-arrow: mid-cross',
        ]
    )
    diagram = parse_diagram(text)
    assert [e.style.arrow for e in diagram.edges.values()] == ['none']


def test_arrow_comment_after_point_is_ignored():
    diagram = parse_diagram('\\fill (0, 0) circle (0.15);\n% edge-arrow: mid-cross\n')
    assert len(diagram.points) == 1
    assert not diagram.edges


def test_missing_comment_falls_back_to_native_style():
    diagram = parse_diagram(rf'\draw[{MARKINGS}] (0, 0) -- (1, 0);')
    (edge,) = diagram.edges.values()
    assert edge.style.arrow == 'none'


def test_unknown_comment_style_keeps_native_style(caplog):
    with caplog.at_level(logging.WARNING):
        diagram = parse_diagram(r'\draw[->] (0, 0) -- (1, 0); % edge-arrow: sideways')
    (edge,) = diagram.edges.values()
    assert edge.style.arrow == 'forward'
    assert 'sideways' in caplog.text


def test_invalid_values_fail_the_whole_parse():
    text = '\n'.join(
        [
            r'\fill (0, 0) circle (0.15);',
            r'\draw (0, 0) ellipse (0.01 and 1);',
        ]
    )
    with pytest.raises(ParseFailure) as excinfo:
        parse_diagram(text)
    assert str(excinfo.value).startswith('[line 2, col 1]')
    assert 'rx' in str(excinfo.value)


def test_bad_line_width_fails_the_whole_parse():
    with pytest.raises(ParseFailure, match='line width'):
        parse_diagram(r'\draw[line width=thick] (0, 0) -- (1, 0);')


def test_escaped_braces_in_label_are_kept():
    diagram = parse_diagram(r'\node at (0, 0) {$\{x$};')
    (label,) = diagram.labels.values()
    assert label.text == r'\{x'


def test_empty_document_parses_to_empty_diagram():
    diagram = parse_diagram('% nothing here\n\n')
    assert diagram.is_empty()
    assert diagram.ids.peek() == 1


def test_out_of_range_coordinate_fails_the_whole_parse():
    with pytest.raises(ParseFailure, match='exceeds'):
        parse_diagram(r'\fill (33000000000000.00, 0.00) circle (0.15);')
