"""Size unit conversion.

Sizes are stored as integer KiB. User input arrives either as a decimal
value plus a binary unit or as a composed string such as ``"1.5GiB"``.
"""

import re
from decimal import ROUND_DOWN, ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Optional, Union

from ..core.exceptions import FormatError, ValidationError
from ..models.sizes import SizeInput, SizeQuantity, SizeUnit

KIB_PER_MIB = 1024
KIB_PER_GIB = 1024 * 1024

EMPTY_SIZE = "-"

# Largest size a signed 64-bit column holds
MAX_KIB = 2**63 - 1

_MULTIPLIERS = {
    SizeUnit.KIB: 1,
    SizeUnit.MIB: KIB_PER_MIB,
    SizeUnit.GIB: KIB_PER_GIB,
}

_UNITS_BY_NAME = {unit.value.lower(): unit for unit in SizeUnit}

# No space between number and unit
_SIZE_PATTERN = re.compile(r"^([\d.]+)(GiB|MiB|KiB)$", re.IGNORECASE)

_TWO_PLACES = Decimal("0.01")


def _coerce_unit(unit: Union[SizeUnit, str]) -> SizeUnit:
    if isinstance(unit, SizeUnit):
        return unit
    try:
        return _UNITS_BY_NAME[str(unit).lower()]
    except KeyError:
        raise ValidationError(f"Unknown size unit: {unit}. Use KiB, MiB or GiB") from None


def parse_size(value: Union[Decimal, float, int, str], unit: Union[SizeUnit, str]) -> int:
    """
    Convert a value in the given unit to whole KiB.

    Rounds half away from zero so a value entered and later re-displayed
    never drifts between call sites.

    Args:
        value: Non-negative decimal amount
        unit: KiB, MiB or GiB

    Returns:
        Size in KiB
    """
    size_unit = _coerce_unit(unit)
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value))
    except InvalidOperation:
        raise ValidationError(f"Invalid size value: {value}") from None

    if not amount.is_finite() or amount < 0:
        raise ValidationError(f"Invalid size value: {value}")

    try:
        kib = (amount * _MULTIPLIERS[size_unit]).quantize(Decimal(1), rounding=ROUND_HALF_UP)
    except InvalidOperation:
        raise ValidationError(f"Size too large: {value} {size_unit.value}") from None

    if kib > MAX_KIB:
        raise ValidationError(f"Size too large: {value} {size_unit.value}")
    return int(kib)


def parse_size_string(text: str) -> int:
    """
    Convert a size string such as ``"1.5GiB"`` or ``"512mib"`` to KiB.

    Args:
        text: Number immediately followed by a unit, case-insensitive

    Returns:
        Size in KiB
    """
    match = _SIZE_PATTERN.match(text.strip())
    if not match:
        raise FormatError(
            f'Invalid size format: {text}. Use format like "1.5GiB", "512MiB", "2048KiB"'
        )

    try:
        amount = Decimal(match.group(1))
    except InvalidOperation:
        raise FormatError(f"Invalid size format: {text}") from None

    return parse_size(amount, match.group(2))


def to_kib(size: Optional[SizeInput]) -> Optional[int]:
    """
    Convert any accepted size input to KiB.

    Args:
        size: Quantity, composed string, or None

    Returns:
        Size in KiB, or None when no size was given
    """
    if size is None:
        return None
    if isinstance(size, SizeQuantity):
        return parse_size(size.value, size.unit)
    return parse_size_string(size)


def format_size(kib: Optional[int]) -> str:
    """
    Render a KiB value for display.

    Decimals are truncated rather than rounded, so 1048575 KiB shows as
    ``"1023.99 MiB"`` and only a full GiB shows in GiB.

    Args:
        kib: Size in KiB, or None

    Returns:
        Human-readable size
    """
    if kib is None:
        return EMPTY_SIZE

    gib = Decimal(kib) / KIB_PER_GIB
    if gib >= 1:
        return f"{gib.quantize(_TWO_PLACES, rounding=ROUND_DOWN)} GiB"

    mib = Decimal(kib) / KIB_PER_MIB
    if mib >= 1:
        return f"{mib.quantize(_TWO_PLACES, rounding=ROUND_DOWN)} MiB"

    return f"{kib} KiB"
