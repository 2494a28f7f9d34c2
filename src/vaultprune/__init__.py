"""Recursively enumerate and prune secrets from a Vault key/value store."""

__version__ = "0.1.0"
