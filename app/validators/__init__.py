"""
app/validators package marker.
"""

from app.validators.property_validator import PropertyRowValidator

__all__ = [
    "PropertyRowValidator",
]
