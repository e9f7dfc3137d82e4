from app.api.auth import router as auth_router
from app.api.listings import router as listings_router
from app.api.search import router as search_router
from app.api.drafts import router as drafts_router
from app.api.favorites import router as favorites_router
from app.api.leads import router as leads_router
from app.api.admin import router as admin_router
from app.api.media import router as media_router
from app.api.tools import router as tools_router

__all__ = [
    "auth_router",
    "listings_router",
    "search_router",
    "drafts_router",
    "favorites_router",
    "leads_router",
    "admin_router",
    "media_router",
    "tools_router",
]
