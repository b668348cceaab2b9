"""
Repository layer exports.
"""

from db.repositories.errors import PersistenceGatewayError, RepositoryError

__all__ = [
    "PersistenceGatewayError",
    "RepositoryError",
]
