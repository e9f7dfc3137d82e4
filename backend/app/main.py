import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from app.config import settings
from app.api import (
    auth_router,
    listings_router,
    search_router,
    drafts_router,
    favorites_router,
    leads_router,
    admin_router,
    media_router,
    tools_router,
)

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(title="HomeHNI API", version="0.1.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:3000", "http://localhost:5173", settings.app_base_url],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


app.include_router(auth_router, prefix="/api")
app.include_router(listings_router, prefix="/api")
app.include_router(search_router, prefix="/api")
app.include_router(drafts_router, prefix="/api")
app.include_router(favorites_router, prefix="/api")
app.include_router(leads_router, prefix="/api")
app.include_router(admin_router, prefix="/api")
app.include_router(media_router, prefix="/api")
app.include_router(tools_router, prefix="/api")


# Uploaded listing images and videos
app.mount(
    settings.media_base_url,
    StaticFiles(directory=settings.media_root, check_dir=False),
    name="media",
)


@app.get("/health")
async def health():
    return {"status": "ok"}
