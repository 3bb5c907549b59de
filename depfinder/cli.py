"""Command line interface.

    depfinder dependents 'src/**/*.js' --circular
    depfinder dependencies src/app.ts --specifiers
"""

import argparse
import json
import logging
import sys
from typing import Optional

from .aliases import AliasConfigError
from .config import DependentsOptions
from .dependencies import find_dependencies
from .scanner import expand_globs, find_dependents


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="depfinder",
        description="Find the files that import a JavaScript/TypeScript file, and the files it imports.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log every skipped file")

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--alias-config", metavar="FILE", help="JSON alias table (bundler resolve.alias)")
    common.add_argument("--specifiers", action="store_true", help="Report imported names for each edge")

    sub = parser.add_subparsers(dest="command", required=True)

    dependents = sub.add_parser("dependents", parents=[common], help="Files importing the given files")
    dependents.add_argument("globs", nargs="+", help="Query files (glob patterns, `!` to exclude)")
    dependents.add_argument("--root", help="Search this directory instead of each file's own directory")
    dependents.add_argument("--circular", action="store_true", help="Flag dependents the file imports back")
    dependents.add_argument("--only-circular", action="store_true", help="Keep only circular dependents")
    dependents.add_argument("--only-not-found", action="store_true", help="Report only files nobody imports")
    dependents.add_argument(
        "--exclude", action="append", default=[], metavar="PATTERN",
        help="Extra gitignore-style pattern to skip (repeatable)",
    )

    dependencies = sub.add_parser("dependencies", parents=[common], help="Files imported by the given files")
    dependencies.add_argument("globs", nargs="+", help="Files to inspect (glob patterns)")

    return parser


def options_from_args(args: argparse.Namespace) -> DependentsOptions:
    return DependentsOptions(
        root=getattr(args, "root", None),
        alias_config=args.alias_config,
        specifiers=args.specifiers,
        circular=getattr(args, "circular", False),
        only_circular=getattr(args, "only_circular", False),
        only_not_found=getattr(args, "only_not_found", False),
        exclude=tuple(getattr(args, "exclude", ())),
    )


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    options = options_from_args(args)

    try:
        if args.command == "dependents":
            result = find_dependents(args.globs, options)
        else:
            result = find_dependencies(expand_globs(args.globs), options)
    except AliasConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    json.dump({path: entry.to_dict() for path, entry in result.items()}, sys.stdout, indent=2)
    sys.stdout.write("\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
