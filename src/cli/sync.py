# =============================================================================
# src/cli/sync.py -- CLI Sync Command (Vault -> ChromaDB)
# =============================================================================
#
# Standalone CLI for synchronizing an Obsidian vault into a ChromaDB
# collection and for inspecting both sides of the sync.
#
# Supported subcommands:
#
#   sync        Run one full sync pass (optionally from a subfolder)
#   ls          List the immediate children of a vault folder
#   note        Print one note's tags and content
#   collections List every collection on the Chroma server
#   collection  Show one collection
#
# Exit codes:
#   0  success
#   1  the sync or a lookup failed (configuration, vault, vector store,
#      embedding preflight, or malformed data)
#   2  bad command-line usage (argparse)
#
# Logs go to stderr; listings and summaries go to stdout.
#
# Usage examples:
#   python -m src.cli sync
#   python -m src.cli sync --root Projects --chunk-size 25
#   python -m src.cli ls Projects/
#   python -m src.cli note "Projects/Plan.md"
#   python -m src.cli collections
# =============================================================================

"""Standalone CLI for syncing an Obsidian vault into ChromaDB.

Usage::

    python -m src.cli sync [--root FOLDER] [--collection NAME] [--chunk-size N]
    python -m src.cli ls [FOLDER]
    python -m src.cli note PATH
    python -m src.cli collections
    python -m src.cli collection NAME

Configuration comes from the environment, ``.env``, and
``config/config.yaml`` (see ``src/config/settings.py``).
"""

from __future__ import annotations

import argparse
import asyncio
import sys

from src.config.loader import load_settings
from src.config.settings import Settings
from src.models.vault import FOLDER_SEPARATOR, FolderPath, NotePath
from src.models.vector_store import CollectionName
from src.utils.errors import InvalidIdentifierError, VaultSyncError

# ---------------------------------------------------------------------------
# Argument converters
# ---------------------------------------------------------------------------


def _folder_arg(value: str) -> FolderPath | None:
    """Accept ``Projects`` or ``Projects/``; ``/`` alone means the vault root."""
    stripped = value.rstrip(FOLDER_SEPARATOR)
    if not stripped:
        return None
    try:
        return FolderPath(stripped)
    except InvalidIdentifierError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc


def _note_arg(value: str) -> NotePath:
    try:
        return NotePath(value)
    except InvalidIdentifierError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc


def _collection_arg(value: str) -> CollectionName:
    try:
        return CollectionName(value)
    except InvalidIdentifierError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc


def _positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"{value!r} is not an integer") from exc
    if number < 1:
        raise argparse.ArgumentTypeError(f"{value!r} must be at least 1")
    return number


# ---------------------------------------------------------------------------
# Subcommand handlers
# ---------------------------------------------------------------------------


async def _handle_sync(args: argparse.Namespace, app_settings: Settings) -> int:
    """Run one sync pass and print its summary."""
    from src.main import run_sync

    collection = args.collection or app_settings.chroma_collection
    print(f"Syncing vault {app_settings.obsidian_base_url} -> collection '{collection}'")
    if args.root is not None:
        print(f"  Root: {args.root.to_wire()}")

    result = await run_sync(
        app_settings,
        root=args.root,
        collection=args.collection,
        chunk_size=args.chunk_size,
    )

    print("\nSync complete:")
    print(f"  Notes synced:    {result.notes_synced}")
    print(f"  Tagged:          {result.tagged_notes}")
    print(f"  Untagged:        {result.untagged_notes}")
    print(f"  Chunks upserted: {result.chunks_upserted}")
    if result.chunks_failed:
        print(f"  Chunks failed:   {result.chunks_failed}")
    print(f"  Time:            {result.elapsed_seconds:.2f}s")
    return 1 if result.chunks_failed else 0


async def _handle_ls(args: argparse.Namespace, app_settings: Settings) -> int:
    """Print the children of a vault folder, folders first."""
    from src.main import build_vault_provider

    async with build_vault_provider(app_settings) as vault:
        children = await vault.list_folder(args.folder)

    folders = sorted(p.to_wire() for p in children if isinstance(p, FolderPath))
    notes = sorted(p for p in children if not isinstance(p, FolderPath))
    for entry in [*folders, *notes]:
        print(entry)
    return 0


async def _handle_note(args: argparse.Namespace, app_settings: Settings) -> int:
    """Print one note with its tags."""
    from src.main import build_vault_provider

    async with build_vault_provider(app_settings) as vault:
        note = await vault.get_note(args.path)

    print(f"Path: {note.path}")
    print(f"Tags: {', '.join(note.tags) if note.tags else '(none)'}")
    print()
    print(note.content)
    return 0


async def _handle_collections(app_settings: Settings) -> int:
    """List collections on the configured Chroma server."""
    from src.main import build_vector_store

    vector_store = await build_vector_store(app_settings)
    try:
        collections = await vector_store.list_collections()
    finally:
        await vector_store.aclose()

    if not collections:
        print("No collections.")
        return 0
    for collection in sorted(collections, key=lambda c: c.name):
        print(f"{collection.name:<40} {collection.id}")
    return 0


async def _handle_collection(args: argparse.Namespace, app_settings: Settings) -> int:
    """Show one collection's id and record count."""
    from src.main import build_vector_store

    vector_store = await build_vector_store(app_settings)
    try:
        collection = await vector_store.get_collection(args.name)
        count = await vector_store.with_collection(collection, lambda c: c.count())
    finally:
        await vector_store.aclose()

    print(f"Name:    {collection.name}")
    print(f"ID:      {collection.id}")
    print(f"Records: {count}")
    return 0


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------


def _build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the sync CLI."""
    parser = argparse.ArgumentParser(
        prog="python -m src.cli",
        description="Sync an Obsidian vault into a ChromaDB collection.",
    )
    subparsers = parser.add_subparsers(dest="command", help="Sync commands")

    # -- sync --
    sync_parser = subparsers.add_parser("sync", help="Sync the vault into ChromaDB")
    sync_parser.add_argument(
        "--root",
        type=_folder_arg,
        default=None,
        help="Vault folder to start from (default: vault root)",
    )
    sync_parser.add_argument(
        "--collection",
        type=_collection_arg,
        default=None,
        help="Target collection (default: CHROMA_COLLECTION)",
    )
    sync_parser.add_argument(
        "--chunk-size",
        type=_positive_int,
        default=None,
        dest="chunk_size",
        help="Notes per upsert chunk (default: SYNC_CHUNK_SIZE)",
    )

    # -- ls --
    ls_parser = subparsers.add_parser("ls", help="List a vault folder")
    ls_parser.add_argument(
        "folder",
        nargs="?",
        type=_folder_arg,
        default=None,
        help="Folder to list (default: vault root)",
    )

    # -- note --
    note_parser = subparsers.add_parser("note", help="Show one note")
    note_parser.add_argument("path", type=_note_arg, help="Vault-relative note path")

    # -- collections --
    subparsers.add_parser("collections", help="List ChromaDB collections")

    # -- collection --
    collection_parser = subparsers.add_parser("collection", help="Show one ChromaDB collection")
    collection_parser.add_argument("name", type=_collection_arg, help="Collection name")

    return parser


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for the sync tool.

    Parses the subcommand, loads and validates settings, configures logging,
    and dispatches to the matching handler.  Any :class:`VaultSyncError` is
    reported on stderr with exit code 1.
    """
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(2)

    try:
        app_settings = load_settings()
    except VaultSyncError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)

    from src.main import setup_logging

    setup_logging(app_settings)

    if args.command == "sync":
        handler = _handle_sync(args, app_settings)
    elif args.command == "ls":
        handler = _handle_ls(args, app_settings)
    elif args.command == "note":
        handler = _handle_note(args, app_settings)
    elif args.command == "collections":
        handler = _handle_collections(app_settings)
    else:
        handler = _handle_collection(args, app_settings)

    try:
        exit_code = asyncio.run(handler)
    except VaultSyncError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        exit_code = 1

    sys.exit(exit_code)


if __name__ == "__main__":
    main()
