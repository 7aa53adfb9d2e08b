# app/main.py - Fleet admin dashboard API
from fastapi import FastAPI
from contextlib import asynccontextmanager
from pathlib import Path
from app.api.admin import router as admin_router
from app.api.storage import router as storage_router
from app.config import settings
from app.database import init_db
from app.services.dashboard_service import DashboardRegistry
import logging

logging.basicConfig(level=settings.log_level)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    if settings.backend == "local":
        await init_db()
        Path(settings.media_root).mkdir(parents=True, exist_ok=True)
        logger.info(f"🗄️ Local backend ready: {settings.database_url}, media in {settings.media_root}")
    else:
        logger.info(f"☁️ Hosted backend: {settings.supabase_url}")

    app.state.dashboards = DashboardRegistry(page_size=settings.items_per_page)
    logger.info(f"🚗 Fleet dashboard started ({settings.items_per_page} cars per page)")

    yield


app = FastAPI(
    title="Fleet Admin Dashboard",
    description="Manage the rental fleet listing: post and edit cars with photos, browse and delete inventory",
    version="1.0.0",
    lifespan=lifespan
)

app.include_router(admin_router)
app.include_router(storage_router)


@app.get("/")
async def root():
    return {
        "message": "Fleet admin dashboard is running",
        "version": "1.0.0",
        "backend": settings.backend,
    }


@app.get("/health")
async def health():
    return {
        "status": "OK",
        "backend": settings.backend,
        "endpoints": {
            "dashboard": "/admin/state",
            "inventory": "/admin/inventory",
            "storage": "/storage",
        },
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("app.main:app", host="0.0.0.0", port=8000)
