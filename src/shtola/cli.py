# src/shtola/cli.py
import sys
import argparse
import logging
from pathlib import Path

from shtola.builder import Shtola
from shtola.config import DEFAULT_IGNORE_PATTERNS
from shtola.core.tree import render_tree
from shtola.errors import ShtolaError


def create_arg_parser():
    parser = argparse.ArgumentParser(
        prog="shtola",
        description="Copy a directory tree into a destination, optionally stripping front matter."
    )
    parser.add_argument("source", type=str, help="Source directory")
    parser.add_argument("destination", type=str, help="Destination directory (created if missing)")
    parser.add_argument("--clean", action="store_true", help="Empty the destination before writing")
    parser.add_argument("--frontmatter", action="store_true", help="Parse and strip YAML front matter")
    parser.add_argument(
        "-i", "--ignore",
        action="append",
        default=[],
        metavar="PATTERN",
        help="Gitignore-style pattern to skip (repeatable)"
    )
    parser.add_argument("--ignore-file", type=str, default=None, help="File with extra ignore patterns")
    parser.add_argument("--no-default-ignores", action="store_true", help="Do not skip VCS metadata")
    parser.add_argument("--tree", action="store_true", help="Print the tree of written files")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def main(argv=None):
    try:
        parser = create_arg_parser()
        args = parser.parse_args(argv)

        logging.basicConfig(
            level=logging.DEBUG if args.verbose else logging.WARNING,
            format="%(levelname)s %(name)s: %(message)s",
        )

        source = Path(args.source).resolve()
        if not source.is_dir():
            print(f"Error: Invalid directory '{source}'", file=sys.stderr)
            sys.exit(1)

        s = Shtola()
        s.source(source)
        s.destination(args.destination)
        s.clean(args.clean)
        s.frontmatter(args.frontmatter)
        if not args.no_default_ignores:
            s.ignores(DEFAULT_IGNORE_PATTERNS)
        s.ignores(args.ignore)
        if args.ignore_file:
            s.ignore_file = Path(args.ignore_file)

        print("--- shtola ---")
        print(f"Source:      {s.config.source}")
        print(f"Destination: {s.config.destination}")

        ir = s.build()

        if args.tree:
            print(render_tree(ir.files, s.config.destination.name), end="")
        print(f"Success! {len(ir.files)} files written.")

    except KeyboardInterrupt:
        print("\nCancelled.")
        sys.exit(1)

    except (OSError, ShtolaError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
