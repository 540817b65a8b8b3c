"""Size input models."""

from decimal import Decimal
from enum import Enum
from typing import Optional, Union

from pydantic import BaseModel, Field


class SizeUnit(str, Enum):
    """Binary size unit accepted on input."""

    KIB = "KiB"
    MIB = "MiB"
    GIB = "GiB"


class SizeQuantity(BaseModel):
    """A size entered as a decimal value plus a unit."""

    value: Decimal = Field(ge=0)
    unit: SizeUnit


# Either {"value": 1.5, "unit": "GiB"} or the composed string "1.5GiB"
SizeInput = Union[SizeQuantity, str]


class SizeParseRequest(BaseModel):
    """Request to convert a size input to KiB."""

    size: SizeInput


class SizeReading(BaseModel):
    """A size in KiB with its display rendering."""

    kib: Optional[int] = None
    display: str
