"""Shift expression models.

Defines ShiftUnit, ShiftTerm and ShiftExpression, the parsed form of strings
such as "+1D-2h".
"""

from enum import Enum
from typing import Literal, Tuple

from pydantic import BaseModel, Field

__all__ = ["MAX_QUANTITY", "ShiftUnit", "ShiftTerm", "ShiftExpression"]

# Quantities are bounded to a 32-bit signed integer
MAX_QUANTITY = 2**31 - 1


class ShiftUnit(str, Enum):
    """Unit letter of a shift term (case-sensitive)."""

    YEAR = "Y"
    MONTH = "M"
    DAY = "D"
    HOUR = "h"
    MINUTE = "m"
    SECOND = "s"
    MILLISECOND = "S"

    @property
    def is_calendar(self) -> bool:
        """Year, month and day shift civil calendar fields."""
        return self in (ShiftUnit.YEAR, ShiftUnit.MONTH, ShiftUnit.DAY)


class ShiftTerm(BaseModel):
    """One signed offset, e.g. "-3h".

    Attributes:
        sign: "+" or "-"
        quantity: Non-negative magnitude
        unit: Unit letter
    """

    model_config = {"frozen": True, "extra": "forbid"}

    sign: Literal["+", "-"] = Field(default="+", description="Direction of the shift")
    quantity: int = Field(..., ge=0, le=MAX_QUANTITY, description="Magnitude of the shift")
    unit: ShiftUnit = Field(..., description="Unit of the shift")

    @property
    def signed_quantity(self) -> int:
        return -self.quantity if self.sign == "-" else self.quantity

    def __str__(self) -> str:
        return f"{self.sign}{self.quantity}{self.unit.value}"


class ShiftExpression(BaseModel):
    """Raw shift expression plus its ordered terms.

    Terms apply left to right, each on the result of the previous one. An empty
    term sequence is the identity shift.
    """

    model_config = {"frozen": True, "extra": "forbid"}

    source: str = Field(default="", description="Expression as written by the user")
    terms: Tuple[ShiftTerm, ...] = Field(default=(), description="Parsed terms in application order")

    @property
    def is_identity(self) -> bool:
        return all(term.quantity == 0 for term in self.terms)

    def __str__(self) -> str:
        return "".join(str(term) for term in self.terms)
