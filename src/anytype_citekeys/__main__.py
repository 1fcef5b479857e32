"""Command-line entry point for Anytype Citekeys."""

from __future__ import annotations

import argparse
import asyncio
import logging
from typing import Callable

from anytype_citekeys.config import EnvironmentPreferences, load_settings
from anytype_citekeys.pipeline import CitekeyManager
from anytype_citekeys.services.anytype import AnytypeAPIError, AnytypeClient, AnytypeLibrary

REBUILD_PROMPT = (
    "This will overwrite existing citation keys for every item in your library. "
    "Continue? [y/N] "
)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="anytype-citekeys",
        description="Generate and maintain citation keys for Anytype references.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log progress information.",
    )
    commands = parser.add_subparsers(dest="command", required=True)
    commands.add_parser("backfill", help="Generate keys for items that have none.")
    rebuild = commands.add_parser("rebuild", help="Regenerate the key of every item.")
    rebuild.add_argument(
        "--yes",
        action="store_true",
        help="Do not ask for confirmation before overwriting keys.",
    )
    preview = commands.add_parser("preview", help="Show the key an object would get.")
    preview.add_argument("object_id", help="ID of the Anytype object")
    return parser


async def run_command(args: argparse.Namespace, manager: CitekeyManager) -> str:
    if args.command == "preview":
        try:
            record = await manager.library.get(args.object_id)
        except AnytypeAPIError as exc:
            return f"Error: {exc}"
        if record is None:
            return f"Error: object {args.object_id} not found"
        return manager.preview(record)
    return await manager.run_backfill(overwrite=args.command == "rebuild")


async def run_with_client(
    args: argparse.Namespace, manager: CitekeyManager, client: AnytypeClient
) -> str:
    async with client:
        return await run_command(args, manager)


def main(
    argv: list[str] | None = None,
    prompt_func: Callable[[str], str] | None = None,
) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.command == "rebuild" and not args.yes:
        prompt = prompt_func or input
        if prompt(REBUILD_PROMPT).strip().lower() not in {"y", "yes"}:
            print("Aborted.")
            return 0

    settings = load_settings()
    client = AnytypeClient(settings=settings)
    manager = CitekeyManager(
        library=AnytypeLibrary(client=client, settings=settings),
        preferences=EnvironmentPreferences(),
    )
    manager.startup()
    status = asyncio.run(run_with_client(args, manager, client))
    print(status)
    return 1 if status.startswith("Error:") else 0


if __name__ == "__main__":
    raise SystemExit(main())
