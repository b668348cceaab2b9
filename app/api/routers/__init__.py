"""
app/api/routers package marker.
"""

from app.api.routers.property_import import router as property_import_router

__all__ = [
    "property_import_router",
]
