"""Example pipeline: author a diagram in code, keep its text in sync and render a preview."""

from pathlib import Path

from feynman_ir import DiagramSession, EdgeStyle, LabelBinding
from feynman_ir.preview import save_png


def main() -> None:
    session = DiagramSession()
    diagram = session.diagram

    left = diagram.create_point((0.0, 0.0))
    right = diagram.create_point((120.0, 0.0))
    upper = diagram.create_edge("curve", left.position, right.position, (60.0, -70.0), EdgeStyle("spring"))
    diagram.create_edge("curve", left.position, right.position, (60.0, 70.0), EdgeStyle("spring"))
    diagram.create_edge("straight", (-80.0, 0.0), left.position, style=EdgeStyle("wavy", arrow="mid-forward"))
    diagram.create_edge("straight", right.position, (200.0, 0.0), style=EdgeStyle("wavy", arrow="mid-forward"))
    diagram.create_label((0.0, 0.0), "g", LabelBinding(upper.id, "mid", (0.0, -18.0)))

    session.regenerate()
    print(session.text)

    # moving the upper gluon drags its label along
    diagram.update_edge(upper.id, control=(60.0, -100.0))
    session.regenerate()
    print(session.text)

    output = save_png(diagram, Path("/tmp/feynman_ir") / "gluon_loop.png")
    print(f"Preview written to {output}")


if __name__ == "__main__":
    main()
