"""Definition for scbook’s CLI entry point to be used programmatically."""

from __future__ import annotations

import sys
from argparse import ArgumentParser
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from argparse import Namespace
    from collections.abc import Sequence


def _cmd_settings(args: Namespace) -> None:
    from ._settings import settings

    print(settings)


def _cmd_chunks(args: Namespace) -> None:
    from ._chunks import read_chunks
    from ._documents import find_document

    document = find_document(args.prefix, flexible=args.flexible)
    for chunk in read_chunks(document).values():
        print(f"{chunk.position}\t{chunk.line}\t{chunk.name}")


def _cmd_history(args: Namespace) -> None:
    from ._chunks import read_chunks, resolve_chunk
    from ._documents import find_document
    from ._transcript import render_transcript

    document = find_document(args.prefix, flexible=args.flexible)
    chunks = resolve_chunk(read_chunks(document), args.chunk)
    print(render_transcript(chunks), end="")


def _add_document_args(parser: ArgumentParser) -> None:
    parser.add_argument("prefix", help="Document name without suffix.")
    parser.add_argument(
        "--no-flexible",
        dest="flexible",
        action="store_false",
        help="Only look for <prefix><suffix> in the working directory.",
    )


def main(argv: Sequence[str] | None = None) -> None:
    """Run a builtin scbook command."""
    parser = ArgumentParser(
        prog="scbook",
        description="Inspect the chunks of the book’s tutorial documents.",
    )
    parser.set_defaults(func=lambda _: parser.print_help())
    subparsers = parser.add_subparsers()

    parser_settings = subparsers.add_parser("settings", help="Print the settings.")
    parser_settings.set_defaults(func=_cmd_settings)

    parser_chunks = subparsers.add_parser(
        "chunks", help="List the referenceable chunks of a document."
    )
    _add_document_args(parser_chunks)
    parser_chunks.set_defaults(func=_cmd_chunks)

    parser_history = subparsers.add_parser(
        "history", help="Print the code needed to reach a chunk."
    )
    _add_document_args(parser_history)
    parser_history.add_argument("chunk", help="Name of the last chunk.")
    parser_history.set_defaults(func=_cmd_history)

    args = parser.parse_args(argv)
    args.func(args)


def console_main():
    """Serve as CLI entry point and don’t show a Python traceback for bad documents."""
    from . import logging as logg
    from ._chunks import ChunkNotFoundError, ChunkParseError
    from ._documents import DocumentNotFoundError

    try:
        main()
    except (ChunkNotFoundError, ChunkParseError, DocumentNotFoundError) as e:
        logg.error(str(e))
        sys.exit(1)
