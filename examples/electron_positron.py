"""Example pipeline: parse a hand-written TikZ diagram and normalize it."""

from feynman_ir import parse_diagram, validate, print_diagram, generate_tikz_document
from feynman_ir.paths import build_polyline, markers_for_edge

TEXT = r"""
% e+ e- -> mu+ mu- via a virtual photon
\begin{tikzpicture}
  \fill (0, 0) circle (0.15);
  \fill (4, 0) circle (0.15);
  \draw[->] (-2, 2) -- (0, 0);
  \draw[<-] (-2, -2) -- (0, 0);
  \draw[draw=blue, decorate, decoration={snake}] (0, 0) -- (4, 0);
  \draw[->] (4, 0) -- (6, 2);
  \draw[<-] (4, 0) -- (6, -2);
  \node at (-2.4, 2.2) {$e^-$};
  \node at (-2.4, -2.2) {$e^+$};
  \node at (2, 0.6) {$\gamma$};
  \node at (6.4, 2.2) {$\mu^-$};
  \node at (6.4, -2.2) {$\mu^+$};
\end{tikzpicture}
"""


def main() -> None:
    diagram = parse_diagram(TEXT)
    validate(diagram)
    print(f"Diagram IR:\n{print_diagram(diagram)}")

    print("Strokes:")
    for edge in diagram.edges.values():
        polyline = build_polyline(edge)
        markers = markers_for_edge(edge)
        print(f"  edge #{edge.id}: {len(polyline)} samples, {len(markers)} marker(s)")

    print("\nCanonical text:")
    print(generate_tikz_document(diagram))


if __name__ == "__main__":
    main()
