from feynman_ir import Diagram, EdgeStyle, LabelBinding
from feynman_ir.printer import format_element, print_diagram


def test_point_and_edge_lines():
    diagram = Diagram()
    point = diagram.create_point((1.5, 2.0))
    edge = diagram.create_edge('straight', (0.0, 0.0), (10.0, 0.0), style=EdgeStyle(arrow='forward'))

    assert format_element(point) == 'point #1 at (1.5, 2) [r=3]'
    assert format_element(edge) == 'edge #2 straight (0, 0) -> (10, 0) [solid rgb(0,0,0) width=2 arrow=forward]'


def test_curve_edge_line():
    diagram = Diagram()
    edge = diagram.create_edge('curve', (0.0, 0.0), (10.0, 0.0), (5.0, -4.0), EdgeStyle('wavy', (255, 0, 0), 3.0))

    assert format_element(edge) == 'edge #1 curve (0, 0) ~(5, -4)~> (10, 0) [wavy rgb(255,0,0) width=3 arrow=none]'


def test_ellipse_and_label_lines():
    diagram = Diagram()
    edge = diagram.create_edge('straight', (0.0, 0.0), (10.0, 0.0))
    ellipse = diagram.create_ellipse((5.0, 5.0), 4.0, 2.0)
    label = diagram.create_label((0.0, 0.0), 'e^-', LabelBinding(edge.id, 'end', (1.0, 2.0)))

    assert format_element(ellipse) == 'ellipse #2 at (5, 5) r=(4, 2) [rgb(0,0,0) width=2]'
    assert format_element(label) == 'label #3 at (11, 2) "e^-" [bound to edge #1 end offset=(1, 2)]'


def test_print_diagram_one_line_per_element():
    diagram = Diagram()
    diagram.create_label((0.0, 0.0), 'x')
    diagram.create_point((0.0, 0.0))

    assert print_diagram(diagram) == 'point #2 at (0, 0) [r=3]\nlabel #1 at (0, 0) "x"\n'


def test_print_empty_diagram():
    assert print_diagram(Diagram()) == ''
