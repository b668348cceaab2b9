"""
app/validators/property_validator.py

Row-level validation and type parsing for property CSV imports.
"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Any, Mapping

from app.domain.property_import import RowValidationResult, ValidatedProperty, ValidationFailure

TITLE_MAX_LENGTH = 200
PROJECT_ID_MAX_LENGTH = 50

# properties.price is NUMERIC(15, 2).
PRICE_DECIMAL_PLACES = 2
PRICE_STEP = Decimal("0.01")
PRICE_UPPER_BOUND = Decimal("10000000000000")

# CSV header names, in the order fields are checked.
TITLE_COLUMN = "title"
PRICE_COLUMN = "price"
PROJECT_ID_COLUMN = "projectId"


class PropertyRowValidator:
    """
    Validates one decoded CSV row against the property schema.

    Fields are checked in declaration order and the first violation is
    returned; later fields are not inspected. Columns outside the schema
    are ignored.
    """

    def validate(self, raw: Mapping[str, Any]) -> RowValidationResult:
        title = self._parse_required_string(raw.get(TITLE_COLUMN), TITLE_COLUMN)
        if isinstance(title, ValidationFailure):
            return title
        if len(title) > TITLE_MAX_LENGTH:
            return ValidationFailure(
                field=TITLE_COLUMN,
                message=f"title must be at most {TITLE_MAX_LENGTH} characters",
            )

        price = self._parse_price(raw.get(PRICE_COLUMN))
        if isinstance(price, ValidationFailure):
            return price

        project_id = self._parse_required_string(raw.get(PROJECT_ID_COLUMN), PROJECT_ID_COLUMN)
        if isinstance(project_id, ValidationFailure):
            return project_id
        if len(project_id) > PROJECT_ID_MAX_LENGTH:
            return ValidationFailure(
                field=PROJECT_ID_COLUMN,
                message=f"projectId must be at most {PROJECT_ID_MAX_LENGTH} characters",
            )

        return ValidatedProperty(title=title, price=price, project_id=project_id)

    def _parse_required_string(self, value: Any, column: str) -> str | ValidationFailure:
        if self._is_blank(value):
            return ValidationFailure(field=column, message=f"{column} is required")
        return str(value).strip()

    def _parse_price(self, value: Any) -> Decimal | ValidationFailure:
        if self._is_blank(value):
            return ValidationFailure(field=PRICE_COLUMN, message="price is required")

        try:
            price = Decimal(str(value).strip())
        except (InvalidOperation, ValueError):
            return ValidationFailure(field=PRICE_COLUMN, message="price must be a number")

        if not price.is_finite():
            return ValidationFailure(field=PRICE_COLUMN, message="price must be a number")
        if price <= 0:
            return ValidationFailure(field=PRICE_COLUMN, message="price must be a positive number")
        if price >= PRICE_UPPER_BOUND:
            return ValidationFailure(
                field=PRICE_COLUMN,
                message=f"price must be less than {PRICE_UPPER_BOUND}",
            )
        if price != price.quantize(PRICE_STEP):
            return ValidationFailure(
                field=PRICE_COLUMN,
                message=f"price must have at most {PRICE_DECIMAL_PLACES} decimal places",
            )
        return price

    @staticmethod
    def _is_blank(value: Any) -> bool:
        if value is None:
            return True
        return str(value).strip() == ""
