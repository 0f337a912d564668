from typing import Tuple

from .ir import Diagram, Edge, Element, Ellipse, Label, Point


def vec_str(v: Tuple[float, float]) -> str:
    return f"({v[0]:g}, {v[1]:g})"


def color_str(color: Tuple[int, int, int]) -> str:
    return "rgb({},{},{})".format(*color)


def format_element(element: Element) -> str:
    if isinstance(element, Point):
        return f"point #{element.id} at {vec_str(element.position)} [r={element.radius:g}]"
    if isinstance(element, Edge):
        style = element.style
        if element.kind == "curve":
            path = f"{vec_str(element.start)} ~{vec_str(element.control)}~> {vec_str(element.end)}"
        else:
            path = f"{vec_str(element.start)} -> {vec_str(element.end)}"
        opts = (
            f"{style.stroke_kind} {color_str(style.color)} "
            f"width={style.stroke_width:g} arrow={style.arrow}"
        )
        return f"edge #{element.id} {element.kind} {path} [{opts}]"
    if isinstance(element, Ellipse):
        return (
            f"ellipse #{element.id} at {vec_str(element.center)} "
            f"r=({element.rx:g}, {element.ry:g}) [{color_str(element.color)} width={element.stroke_width:g}]"
        )
    if isinstance(element, Label):
        line = f"label #{element.id} at {vec_str(element.position)} \"{element.text}\""
        binding = element.binding
        if binding is not None:
            line += (
                f" [bound to edge #{binding.target_edge_id} {binding.anchor}"
                f" offset={vec_str(binding.offset)}]"
            )
        return line
    raise ValueError(f"unknown element {element!r}")


def print_diagram(diagram: Diagram) -> str:
    lines = [format_element(element) for element in diagram.elements()]
    return "".join(line + "\n" for line in lines)
