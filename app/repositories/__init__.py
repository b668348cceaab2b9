"""
app/repositories package marker.
"""

from app.repositories.property_repository import PropertyGateway, PropertyRepository

__all__ = [
    "PropertyGateway",
    "PropertyRepository",
]
