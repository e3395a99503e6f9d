# =============================================================================
# src/cli/__init__.py -- CLI Module Overview
# =============================================================================
#
# This package provides the command-line interface for the vault sync.
# Operators run it by hand or from a scheduler (cron, systemd timer) to
# keep a ChromaDB collection in step with an Obsidian vault.
#
#   SYNC (sync.py)
#      Runs one full sync pass, and offers read-only inspection commands
#      for the vault (ls, note) and the Chroma server (collections,
#      collection).
#
# Architecture Notes:
#   - argparse for argument parsing, no Click/Typer.
#   - Heavy imports (chromadb, embedding backends) are deferred inside
#     handlers so `--help` and usage errors stay fast.
#   - The CLI builds its collaborators through src/main.py factories
#     for a single one-shot run; there is no long-lived container.
# =============================================================================

"""CLI tools for the vault sync.

- ``python -m src.cli`` / ``python -m src.cli.sync`` -- sync the vault and
  inspect the vault or the Chroma server.
"""
