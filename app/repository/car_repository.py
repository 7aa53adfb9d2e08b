# app/repository/car_repository.py - cars table through the data gateway
from pydantic import ValidationError as SchemaError
from app.config import settings
from app.schemas.car import CarPage, CarPayload, CarRecord
from app.services.gateway import DataGateway
from typing import Optional
import logging

logger = logging.getLogger(__name__)


class CarRepository:
    def __init__(self, gateway: DataGateway, table: Optional[str] = None):
        self.gateway = gateway
        self.table = table or settings.cars_table

    async def get_page(self, start: int, end: int) -> CarPage:
        """Newest-first window [start, end] plus the exact total."""
        rows, total = await self.gateway.query(
            self.table,
            start=start,
            end=end,
            order_by="created_at",
            descending=True,
        )

        cars = []
        for row in rows:
            try:
                cars.append(CarRecord.model_validate(row))
            except SchemaError as e:
                logger.warning(f"⚠️ Skipping malformed car row {row.get('id')}: {e}")
        return CarPage(cars=cars, total_count=total)

    async def create(self, payload: CarPayload) -> Optional[str]:
        row = await self.gateway.insert(self.table, payload.to_record())
        car_id = row.get("id") if row else None
        logger.info(f"✅ Car created: {car_id}")
        return str(car_id) if car_id is not None else None

    async def update(self, car_id: str, payload: CarPayload):
        await self.gateway.update(self.table, car_id, payload.to_record())
        logger.info(f"✅ Car updated: {car_id}")

    async def delete(self, car_id: str):
        await self.gateway.delete(self.table, car_id)
        logger.info(f"🗑️ Car deleted: {car_id}")
