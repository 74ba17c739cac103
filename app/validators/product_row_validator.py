"""
app/validators/product_row_validator.py

Row-level validation and type parsing for product CSV ingestion.

Rules run in a fixed order and the first failing rule decides the
rejection reason:

    1. sku, name, brand, mrp, price present and non-blank
    2. mrp, price finite ASCII decimal numbers; quantity an ASCII integer
       within the 64-bit range (blank means 0)
    3. price <= mrp
    4. quantity >= 0
"""

from __future__ import annotations

import math
import re
from decimal import Decimal, InvalidOperation
from typing import Any

from app.domain.product import RawRow, RejectionReason, ValidatedProduct

REQUIRED_FIELDS: tuple[str, ...] = ("sku", "name", "brand", "mrp", "price")

# Plain ASCII decimal notation only: no digit separators, no non-ASCII digits.
_NUMBER_PATTERN = re.compile(r"[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")
_INTEGER_PATTERN = re.compile(r"[+-]?[0-9]+")

# quantity is stored as a signed 64-bit integer.
QUANTITY_MAX = 2**63 - 1


class ProductRowValidator:
    """
    Validates one raw CSV row into a ValidatedProduct or a rejection reason.

    Stateless and free of I/O; one instance can be shared across uploads.
    """

    def validate_row(
        self,
        raw_row: RawRow,
    ) -> tuple[ValidatedProduct | None, str | None]:
        """
        Return ``(product, None)`` for a valid row, ``(None, reason)`` otherwise.
        """

        if any(self._is_blank(raw_row.get(name)) for name in REQUIRED_FIELDS):
            return None, RejectionReason.MISSING_REQUIRED_FIELDS

        mrp = self._parse_number(raw_row.get("mrp"))
        price = self._parse_number(raw_row.get("price"))
        quantity = self._parse_quantity(raw_row.get("quantity"))
        if mrp is None or price is None or quantity is None:
            return None, RejectionReason.INVALID_NUMBER_FORMAT

        if price > mrp:
            return None, RejectionReason.PRICE_ABOVE_MRP

        if quantity < 0:
            return None, RejectionReason.NEGATIVE_QUANTITY

        return (
            ValidatedProduct(
                sku=self._strip(raw_row.get("sku")),
                name=self._strip(raw_row.get("name")),
                brand=self._strip(raw_row.get("brand")),
                color=self._parse_optional_string(raw_row.get("color")),
                size=self._parse_optional_string(raw_row.get("size")),
                mrp=mrp,
                price=price,
                quantity=quantity,
            ),
            None,
        )

    def _parse_number(self, value: Any) -> float | None:
        text = self._strip(value)
        if not _NUMBER_PATTERN.fullmatch(text):
            return None
        try:
            parsed = float(Decimal(text))
        except (InvalidOperation, ValueError):
            return None
        # Values beyond float range round to inf.
        if not math.isfinite(parsed):
            return None
        return parsed

    def _parse_quantity(self, value: Any) -> int | None:
        if self._is_blank(value):
            return 0
        text = self._strip(value)
        if not _INTEGER_PATTERN.fullmatch(text):
            return None
        try:
            parsed = int(text)
        except ValueError:
            return None
        if parsed > QUANTITY_MAX:
            return None
        return parsed

    def _parse_optional_string(self, value: Any) -> str | None:
        if self._is_blank(value):
            return None
        return self._strip(value)

    @staticmethod
    def _strip(value: Any) -> str:
        if value is None:
            return ""
        return str(value).strip()

    @staticmethod
    def _is_blank(value: Any) -> bool:
        if value is None:
            return True
        return str(value).strip() == ""
