"""Vault and reporting services."""

from src.services.vault.service import VaultService, compute_vault

__all__ = ["VaultService", "compute_vault"]
