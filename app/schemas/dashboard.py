# app/schemas/dashboard.py - draft and screen state of the admin dashboard
from pydantic import BaseModel
from enum import Enum
from typing import List, Optional
from app.schemas.car import CarListItem


class NotificationKind(str, Enum):
    SUCCESS = "success"
    ERROR = "error"


class FormMode(str, Enum):
    CREATING = "creating"
    EDITING = "editing"


class DraftCar(BaseModel):
    """Unsaved listing as typed into the form; id None means a new listing."""
    id: Optional[str] = None
    name: str = ""
    price: str = ""
    year: str = ""
    mileage: str = ""
    transmission: str = ""
    fuel_type: str = ""
    description: str = ""


class DraftFieldsUpdate(BaseModel):
    name: Optional[str] = None
    price: Optional[str] = None
    year: Optional[str] = None
    mileage: Optional[str] = None
    transmission: Optional[str] = None
    fuel_type: Optional[str] = None
    description: Optional[str] = None


class PreviewState(BaseModel):
    index: int
    src: str
    source: str


class FormState(BaseModel):
    mode: FormMode
    draft: DraftCar
    previews: List[PreviewState]
    focus_requested: bool = False


class PagerState(BaseModel):
    page: int
    page_size: int
    page_count: int
    total_count: int
    has_previous: bool
    has_next: bool
    show_controls: bool
    fetch_failed: bool = False
    fetch_error: Optional[str] = None


class StatusState(BaseModel):
    is_open: bool = False
    title: str = ""
    message: str = ""
    kind: NotificationKind = NotificationKind.SUCCESS


class ConfirmationState(BaseModel):
    is_open: bool = False
    title: str = ""
    message: str = ""


class DashboardState(BaseModel):
    form: FormState
    cars: List[CarListItem]
    pager: PagerState
    status: StatusState
    confirmation: ConfirmationState
    pending_delete_id: Optional[str] = None
    submitting: bool = False
