"""Command-line entry point: generate a customized template archive."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from contextlib import AsyncExitStack
from pathlib import Path

from template_customizer.archive import build_archive, write_archive
from template_customizer.config import TEMPLATE_CUSTOMIZER_FETCH_CONCURRENCY
from template_customizer.drop_rules import parse_drop_rule
from template_customizer.exceptions import TemplateCustomizerError
from template_customizer.generation import GenerationOptions, load_filtered_parts
from template_customizer.http_utils import create_client, is_remote

logger = logging.getLogger(__name__)

DEFAULT_OUTPUT = "custom-template.zip"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="template-customizer",
        description="Filter a labelled base template into a customized template archive.",
    )
    parser.add_argument("base_url", help="Base template location (URL, file:// URL or directory).")
    parser.add_argument(
        "-i",
        "--include",
        action="append",
        default=[],
        metavar="LABELS",
        help="Comma-separated labels to include; may be repeated.",
    )
    parser.add_argument(
        "-d",
        "--drop",
        action="append",
        default=[],
        metavar="PART_FILE:TITLE",
        help="Remove a section (and its subsections) from a part; may be repeated.",
    )
    parser.add_argument(
        "-o", "--output", default=DEFAULT_OUTPUT, help=f"Output zip path (default: {DEFAULT_OUTPUT})."
    )
    parser.add_argument(
        "--no-anchors", action="store_true", help="Do not emit [#id] anchors above headings."
    )
    parser.add_argument(
        "--concurrency",
        type=int,
        default=TEMPLATE_CUSTOMIZER_FETCH_CONCURRENCY,
        help="Maximum simultaneous part downloads.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")
    return parser


def split_label_args(values: list[str]) -> list[str]:
    """Flatten repeated, comma-separated ``--include`` values."""
    return [label.strip() for value in values for label in value.split(",") if label.strip()]


async def run(base_url: str, options: GenerationOptions, output: Path) -> Path:
    async with AsyncExitStack() as stack:
        client = None
        if is_remote(base_url):
            client = await stack.enter_async_context(create_client())
        loaded = await load_filtered_parts(base_url, options, client=client)
        data = await build_archive(loaded, base_url, client=client)

    target = write_archive(data, output)
    print(f"Generated {target} with {len(loaded.filtered_parts)} part(s).")
    return target


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        drop_rules = [parse_drop_rule(value) for value in args.drop]
    except ValueError as exc:
        parser.error(str(exc))

    options = GenerationOptions(
        labels=split_label_args(args.include),
        drop_rules=drop_rules,
        include_anchors=not args.no_anchors,
        concurrency=args.concurrency,
    )
    try:
        asyncio.run(run(args.base_url, options, Path(args.output)))
    except TemplateCustomizerError as exc:
        logger.debug("Generation failed", exc_info=True)
        print(str(exc), file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
