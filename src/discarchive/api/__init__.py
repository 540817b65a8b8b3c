"""API routers."""

from .discs import router as discs_router
from .movies import router as movies_router
from .others import router as others_router
from .photo_sets import router as photo_sets_router
from .photo_sets import volumes_router
from .series import episodes_router
from .series import router as series_router
from .sizes import router as sizes_router

__all__ = [
    "discs_router",
    "episodes_router",
    "movies_router",
    "others_router",
    "photo_sets_router",
    "series_router",
    "sizes_router",
    "volumes_router",
]
