"""Size conversion helper endpoints."""

from fastapi import APIRouter, Query

from discarchive.models.sizes import SizeParseRequest, SizeReading
from discarchive.services.size_units import format_size, to_kib

router = APIRouter(prefix="/api/sizes", tags=["sizes"])


@router.get("/format", response_model=SizeReading)
async def format_kib(kib: int | None = Query(None, ge=0)) -> SizeReading:
    """Render a KiB value as KiB/MiB/GiB."""
    return SizeReading(kib=kib, display=format_size(kib))


@router.post("/parse", response_model=SizeReading)
async def parse(request: SizeParseRequest) -> SizeReading:
    """Convert a size input such as ``"1.5GiB"`` to KiB."""
    kib = to_kib(request.size)
    return SizeReading(kib=kib, display=format_size(kib))
