# app/services/dashboard_service.py - the "Manage Fleet" screen: form, inventory, dialogs
from app.config import settings
from app.repository.car_repository import CarRepository
from app.schemas.car import CarListItem
from app.schemas.dashboard import DashboardState, FormState, PagerState, PreviewState
from app.services.errors import DashboardError, GatewayError
from app.services.gateway import DataGateway, Principal
from app.services.image_staging import ImageStagingBuffer, PendingPhoto, StagedImage
from app.services.inventory_pager import InventoryPager
from app.services.listing_form import ListingFormController
from app.services.notification_service import ConfirmationDialog, StatusNotifier
from app.services.submission_service import SubmissionPipeline
from typing import Dict, Iterable, List, Optional
import logging

logger = logging.getLogger(__name__)

DELETE_TITLE = "Delete Vehicle"
DELETE_MESSAGE = "Are you sure you want to remove this vehicle from the inventory? This action cannot be undone."


class AdminDashboard:
    def __init__(self, gateway: DataGateway, page_size: Optional[int] = None,
                 preview_prefix: Optional[str] = None):
        self.gateway = gateway
        self.repository = CarRepository(gateway)
        self.pager = InventoryPager(self.repository, page_size)
        self.form = ListingFormController(ImageStagingBuffer(
            preview_prefix if preview_prefix is not None else settings.preview_url_prefix
        ))
        self.pipeline = SubmissionPipeline(gateway, self.repository)
        self.notifier = StatusNotifier()
        self.confirmation = ConfirmationDialog()
        self.pending_delete_id: Optional[str] = None
        self.submitting = False

    def use_gateway(self, gateway: DataGateway):
        self.gateway = gateway
        self.repository.gateway = gateway
        self.pipeline.gateway = gateway

    async def load(self) -> bool:
        return await self.pager.fetch_page()

    # --- listing form ---

    def update_fields(self, **changes):
        self.form.update_fields(**changes)

    def add_photos(self, photos: Iterable[PendingPhoto]) -> List[str]:
        return self.form.images.add_files(photos)

    def remove_photo(self, index: int) -> StagedImage:
        return self.form.images.remove_at(index)

    def start_editing(self, car_id: str):
        for car in self.pager.cars:
            if car.id == car_id:
                self.form.start_editing(car)
                return
        raise KeyError(car_id)

    def cancel_editing(self):
        self.form.cancel()

    async def submit(self) -> bool:
        if self.submitting:
            logger.warning("⏳ Submission already in progress, ignoring")
            return False

        self.submitting = True
        try:
            result = await self.pipeline.submit(self.form)
        except DashboardError as e:
            self.notifier.error(e.title, e.message)
            return False
        finally:
            self.submitting = False

        self.form.reset()
        if result.created and self.pager.page != 1:
            await self.pager.set_page(1)
        else:
            await self.pager.refresh()

        self.notifier.success(
            "Success",
            "Vehicle listed successfully." if result.created else "Vehicle updated successfully.",
        )
        return True

    # --- inventory ---

    async def go_to_page(self, page: int) -> bool:
        return await self.pager.set_page(page)

    async def next_page(self) -> bool:
        return await self.pager.next_page()

    async def previous_page(self) -> bool:
        return await self.pager.previous_page()

    async def refresh(self) -> bool:
        return await self.pager.refresh()

    # --- delete flow ---

    def request_delete(self, car_id: str):
        self.pending_delete_id = car_id
        self.confirmation.show(DELETE_TITLE, DELETE_MESSAGE, on_confirm=self.confirm_delete)

    async def confirm_delete(self) -> bool:
        car_id = self.pending_delete_id
        self.pending_delete_id = None
        self.confirmation.close()
        if not car_id:
            return False

        try:
            await self.repository.delete(car_id)
        except GatewayError as e:
            self.notifier.error("Delete Failed", e.message)
            return False

        await self.pager.refresh()
        return True

    def cancel_delete(self):
        self.pending_delete_id = None
        self.confirmation.cancel()

    def dismiss_notification(self):
        self.notifier.dismiss()

    def snapshot(self) -> DashboardState:
        pager = self.pager
        return DashboardState(
            form=FormState(
                mode=self.form.mode,
                draft=self.form.draft.model_copy(),
                previews=[
                    PreviewState(index=i, src=entry.preview, source=entry.source.value)
                    for i, entry in enumerate(self.form.images)
                ],
                focus_requested=self.form.consume_focus_request(),
            ),
            cars=[CarListItem.from_record(car) for car in pager.cars],
            pager=PagerState(
                page=pager.page,
                page_size=pager.page_size,
                page_count=pager.page_count,
                total_count=pager.total_count,
                has_previous=pager.has_previous,
                has_next=pager.has_next,
                show_controls=pager.show_controls,
                fetch_failed=pager.fetch_failed,
                fetch_error=pager.last_error.message if pager.last_error else None,
            ),
            status=self.notifier.state,
            confirmation=self.confirmation.state,
            pending_delete_id=self.pending_delete_id,
            submitting=self.submitting,
        )


class DashboardRegistry:
    """One dashboard per signed-in admin, loaded when first opened."""

    def __init__(self, page_size: Optional[int] = None):
        self.page_size = page_size
        self._dashboards: Dict[str, AdminDashboard] = {}

    async def get(self, principal: Principal, gateway: DataGateway) -> AdminDashboard:
        dashboard = self._dashboards.get(principal.id)
        if dashboard is not None:
            dashboard.use_gateway(gateway)
            return dashboard

        dashboard = AdminDashboard(gateway, page_size=self.page_size)
        self._dashboards[principal.id] = dashboard
        logger.info(f"🖥️ Dashboard opened for {principal.email or principal.id}")
        await dashboard.load()
        return dashboard
