import argparse
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from feynman_ir import (
    ParseFailure,
    generate_tikz_document,
    parse_diagram,
    print_diagram,
    validate,
)

logger = logging.getLogger(__name__)


def _configure_logging(level: str) -> None:
    log_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        level=log_level,
        format="%(levelname)s:%(name)s:%(message)s",
    )


def _save_png(diagram, path: Path) -> None:
    from feynman_ir.preview import save_png

    save_png(diagram, path)


def main(argv: Optional[Sequence[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Normalize TikZ Feynman diagrams")
    parser.add_argument("path", help="Path to a TikZ subset document")
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Logging level (default: INFO)",
    )
    parser.add_argument(
        "--output-path",
        help="Write the canonical document to the given path instead of stdout",
    )
    parser.add_argument(
        "--png-output-path",
        help="Render a PNG preview of the diagram to the given path",
    )
    parser.add_argument(
        "--dump-ir",
        action="store_true",
        help="Log the parsed diagram elements",
    )
    args = parser.parse_args(argv)

    _configure_logging(args.log_level)

    with open(args.path, encoding="utf-8") as fin:
        text = fin.read()

    logger.info("Parsing diagram from %s", args.path)
    try:
        diagram = parse_diagram(text)
    except ParseFailure as exc:
        logger.error("Parse failed: %s", exc)
        raise SystemExit(1)
    validate(diagram)
    logger.info("Validation succeeded")

    if args.dump_ir:
        logger.info("Diagram IR:\n%s", print_diagram(diagram))

    document = generate_tikz_document(diagram)
    if args.output_path:
        output_path = Path(args.output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        logger.info("Writing TikZ document to %s", output_path)
        output_path.write_text(document, encoding="utf-8")
        print(f"TikZ document written to {output_path}")
    else:
        sys.stdout.write(document)

    if args.png_output_path:
        _save_png(diagram, Path(args.png_output_path))


if __name__ == "__main__":
    main(sys.argv[1:])
