"""
Repository-layer exceptions for persistence flows.
"""

from __future__ import annotations


class RepositoryError(Exception):
    """Base exception for repository failures."""


class PersistenceGatewayError(RepositoryError):
    """Raised when a batch of records cannot be stored."""
