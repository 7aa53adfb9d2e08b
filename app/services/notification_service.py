# app/services/notification_service.py - status and confirmation dialogs
from app.schemas.dashboard import ConfirmationState, NotificationKind, StatusState
from typing import Awaitable, Callable, Optional
import logging

logger = logging.getLogger(__name__)


class StatusNotifier:
    def __init__(self):
        self.state = StatusState()

    def show(self, title: str, message: str, kind: NotificationKind = NotificationKind.SUCCESS):
        self.state = StatusState(is_open=True, title=title, message=message, kind=kind)
        log = logger.error if kind is NotificationKind.ERROR else logger.info
        log(f"🔔 {title}: {message}")

    def success(self, title: str, message: str):
        self.show(title, message, NotificationKind.SUCCESS)

    def error(self, title: str, message: str):
        self.show(title, message, NotificationKind.ERROR)

    def dismiss(self):
        self.state = self.state.model_copy(update={"is_open": False})


class ConfirmationDialog:
    def __init__(self):
        self.state = ConfirmationState()
        self._on_confirm: Optional[Callable[[], Awaitable[None]]] = None

    @property
    def is_open(self) -> bool:
        return self.state.is_open

    def show(self, title: str, message: str, on_confirm: Callable[[], Awaitable[None]]):
        self.state = ConfirmationState(is_open=True, title=title, message=message)
        self._on_confirm = on_confirm

    def close(self):
        self.state = ConfirmationState()
        self._on_confirm = None

    async def confirm(self):
        """Run the confirm callback once; a closed dialog does nothing."""
        callback = self._on_confirm
        self.close()
        if callback is not None:
            await callback()

    def cancel(self):
        self.close()
