"""Vault provider implementations.

The Obsidian Local REST API adapter is the only implementation.  To read a
different note store, implement IVaultProvider and wire it in main.py.
"""

from src.providers.vault.obsidian_rest_provider import ObsidianRestProvider

__all__ = ["ObsidianRestProvider"]
