import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from numbered_refs.cli import run
from numbered_refs.config import NumberingConfig
from numbered_refs.transformation import TransformationError


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        "numbered-refs",
        description="Number the headings, figures and tables of a document tree (as JSON) and resolve the references to them.",
    )
    parser.add_argument("input", type=Path, help="JSON file holding the document tree")
    parser.add_argument(
        "--no-headings", action="store_true", help="Don't number headings"
    )
    parser.add_argument(
        "--no-figures", action="store_true", help="Don't number figures and tables"
    )
    parser.add_argument(
        "--protect",
        action="append",
        default=None,
        metavar="MACRO_ID",
        help="Macro whose content is left alone (default: code). May be given several times.",
    )
    parser.add_argument(
        "--json", action="store_true", help="Print the transformed tree as JSON instead of events"
    )
    parser.add_argument("-v", "--verbose", action="count", default=0)

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose > 1 else logging.INFO if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    config = NumberingConfig()
    if args.protect:
        config = NumberingConfig(protected_macros=tuple(args.protect))

    try:
        output = run(
            args.input,
            config,
            headings=not args.no_headings,
            figures=not args.no_figures,
            as_json=args.json,
        )
    except (OSError, ValueError, TransformationError) as e:
        print(f"numbered-refs: {e}", file=sys.stderr)
        return 1
    print(output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
