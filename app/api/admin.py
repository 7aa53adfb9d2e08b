# app/api/admin.py - admin dashboard: listing form, photos, inventory pages, delete flow
from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile
from fastapi.responses import Response
from app.dependencies import get_dashboard
from app.schemas.dashboard import DashboardState, DraftFieldsUpdate
from app.services.dashboard_service import AdminDashboard
from app.services.image_staging import PendingPhoto
from typing import List, Optional
import logging

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/admin", tags=["Admin Dashboard"])


@router.get("/state", response_model=DashboardState)
async def get_state(dashboard: AdminDashboard = Depends(get_dashboard)):
    """Whole screen: form, previews, current page, dialogs"""
    return dashboard.snapshot()


# --- listing form ---

@router.patch("/form", response_model=DashboardState)
async def update_form(fields: DraftFieldsUpdate, dashboard: AdminDashboard = Depends(get_dashboard)):
    dashboard.update_fields(**fields.model_dump(exclude_none=True))
    return dashboard.snapshot()


@router.post("/form/photos", response_model=DashboardState)
async def add_photos(
        files: List[UploadFile] = File(...),
        dashboard: AdminDashboard = Depends(get_dashboard)
):
    """📷 Stage photos for upload on the next submit"""
    photos = []
    for upload in files:
        content_type = upload.content_type or "application/octet-stream"
        if not content_type.startswith("image/"):
            raise HTTPException(status_code=400, detail=f"{upload.filename} is not an image")
        photos.append(PendingPhoto(
            filename=upload.filename or "photo",
            content=await upload.read(),
            content_type=content_type,
        ))

    dashboard.add_photos(photos)
    logger.info(f"📷 {len(photos)} photos staged")
    return dashboard.snapshot()


@router.delete("/form/photos/{index}", response_model=DashboardState)
async def remove_photo(index: int, dashboard: AdminDashboard = Depends(get_dashboard)):
    try:
        dashboard.remove_photo(index)
    except IndexError:
        raise HTTPException(status_code=404, detail="Photo not found")
    return dashboard.snapshot()


@router.get("/form/previews/{token}")
async def get_preview(token: str, dashboard: AdminDashboard = Depends(get_dashboard)):
    """Bytes of a photo that is staged but not uploaded yet"""
    photo = dashboard.form.images.find_pending(token)
    if photo is None:
        raise HTTPException(status_code=404, detail="Preview not found")
    return Response(content=photo.content, media_type=photo.content_type)


@router.post("/form/edit/{car_id}", response_model=DashboardState)
async def start_editing(car_id: str, dashboard: AdminDashboard = Depends(get_dashboard)):
    try:
        dashboard.start_editing(car_id)
    except KeyError:
        raise HTTPException(status_code=404, detail="Car is not on the current page")
    return dashboard.snapshot()


@router.post("/form/cancel", response_model=DashboardState)
async def cancel_editing(dashboard: AdminDashboard = Depends(get_dashboard)):
    dashboard.cancel_editing()
    return dashboard.snapshot()


@router.post("/form/submit", response_model=DashboardState)
async def submit_form(dashboard: AdminDashboard = Depends(get_dashboard)):
    """🚀 Publish a new listing or save the edited one; the outcome is in status"""
    await dashboard.submit()
    return dashboard.snapshot()


# --- inventory ---

@router.get("/inventory", response_model=DashboardState)
async def get_inventory(
        page: Optional[int] = Query(default=None, ge=1),
        dashboard: AdminDashboard = Depends(get_dashboard)
):
    if page is not None:
        await dashboard.go_to_page(page)
    return dashboard.snapshot()


@router.post("/inventory/next", response_model=DashboardState)
async def next_page(dashboard: AdminDashboard = Depends(get_dashboard)):
    await dashboard.next_page()
    return dashboard.snapshot()


@router.post("/inventory/previous", response_model=DashboardState)
async def previous_page(dashboard: AdminDashboard = Depends(get_dashboard)):
    await dashboard.previous_page()
    return dashboard.snapshot()


@router.post("/inventory/refresh", response_model=DashboardState)
async def refresh_inventory(dashboard: AdminDashboard = Depends(get_dashboard)):
    """🔄 Retry after a failed page load"""
    await dashboard.refresh()
    return dashboard.snapshot()


# --- delete flow ---

@router.post("/cars/{car_id}/delete", response_model=DashboardState)
async def request_delete(car_id: str, dashboard: AdminDashboard = Depends(get_dashboard)):
    """🗑️ Ask for confirmation; nothing is deleted yet"""
    dashboard.request_delete(car_id)
    return dashboard.snapshot()


@router.post("/delete/confirm", response_model=DashboardState)
async def confirm_delete(dashboard: AdminDashboard = Depends(get_dashboard)):
    await dashboard.confirmation.confirm()
    return dashboard.snapshot()


@router.post("/delete/cancel", response_model=DashboardState)
async def cancel_delete(dashboard: AdminDashboard = Depends(get_dashboard)):
    dashboard.cancel_delete()
    return dashboard.snapshot()


@router.post("/notification/dismiss", response_model=DashboardState)
async def dismiss_notification(dashboard: AdminDashboard = Depends(get_dashboard)):
    dashboard.dismiss_notification()
    return dashboard.snapshot()
