# app/services/inventory_pager.py - paginated, newest-first inventory list
from app.config import settings
from app.repository.car_repository import CarRepository
from app.schemas.car import CarRecord
from app.services.errors import FetchError, GatewayError
from typing import List, Optional, Tuple
import logging
import math

logger = logging.getLogger(__name__)


class InventoryPager:
    def __init__(self, repository: CarRepository, page_size: Optional[int] = None):
        self.repository = repository
        self.page_size = page_size or settings.items_per_page
        self.page = 1
        self.total_count = 0
        self.cars: List[CarRecord] = []
        self.last_error: Optional[FetchError] = None
        self._latest_token = 0

    @property
    def page_count(self) -> int:
        return math.ceil(self.total_count / self.page_size)

    @property
    def has_previous(self) -> bool:
        return self.page > 1

    @property
    def has_next(self) -> bool:
        return self.page < self.page_count

    @property
    def show_controls(self) -> bool:
        return self.total_count > self.page_size

    @property
    def fetch_failed(self) -> bool:
        return self.last_error is not None

    def window(self, page: int) -> Tuple[int, int]:
        start = (page - 1) * self.page_size
        return start, start + self.page_size - 1

    async def fetch_page(self, page: Optional[int] = None) -> bool:
        """Load one page. Failures are logged and keep the previous list; returns success."""
        page = page or self.page
        self._latest_token += 1
        token = self._latest_token
        start, end = self.window(page)

        try:
            result = await self.repository.get_page(start, end)
        except GatewayError as e:
            if token == self._latest_token:
                self.last_error = FetchError(e.message)
            logger.error(f"❌ fetch_page({page}) failed: {e}")
            return False

        if token != self._latest_token:
            logger.debug(f"⏭️ fetch_page({page}) response discarded, newer request in flight")
            return False

        self.cars = result.cars
        if result.total_count is not None:
            self.total_count = result.total_count
        self.last_error = None
        logger.info(f"📋 Page {page}: {len(self.cars)} cars of {self.total_count}")
        return True

    async def refresh(self) -> bool:
        return await self.fetch_page(self.page)

    async def set_page(self, page: int) -> bool:
        if page < 1:
            raise ValueError(f"Page must be >= 1, got {page}")
        if page == self.page:
            return False
        self.page = page
        return await self.fetch_page(page)

    async def next_page(self) -> bool:
        if not self.has_next:
            return False
        return await self.set_page(self.page + 1)

    async def previous_page(self) -> bool:
        if not self.has_previous:
            return False
        return await self.set_page(self.page - 1)
