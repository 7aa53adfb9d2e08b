# app/schemas/car.py - persisted car record and its projections
from pydantic import BaseModel, field_validator
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional


class CarPayload(BaseModel):
    """Body of an insert/update against the cars table."""
    make: str
    model: str = ""
    year: int
    price_per_day: Decimal
    images: List[str]
    mileage: str = ""
    transmission: str = ""
    fuel_type: str = ""
    description: str = ""
    user_id: Optional[str] = None

    def to_record(self) -> Dict[str, Any]:
        # an unknown owner is left out so an update keeps the stored one
        record = self.model_dump()
        if record["user_id"] is None:
            del record["user_id"]
        return record


class CarRecord(CarPayload):
    id: str
    created_at: Optional[datetime] = None

    @field_validator("images", mode="before")
    @classmethod
    def _images_default(cls, value):
        return value or []

    @field_validator("model", "mileage", "transmission", "fuel_type", "description", mode="before")
    @classmethod
    def _text_default(cls, value):
        return "" if value is None else value

    @field_validator("id", "user_id", mode="before")
    @classmethod
    def _id_as_text(cls, value):
        return str(value) if value is not None else None

    class Config:
        from_attributes = True


class CarListItem(BaseModel):
    """Inventory row as the dashboard shows it."""
    id: str
    name: str
    price: str
    year: str
    imgs: List[str]
    mileage: str
    transmission: str
    fuel_type: str
    description: str

    @classmethod
    def from_record(cls, car: CarRecord) -> "CarListItem":
        return cls(
            id=car.id,
            name=" ".join(part for part in (car.make, car.model) if part),
            price=str(car.price_per_day),
            year=str(car.year),
            imgs=list(car.images),
            mileage=car.mileage,
            transmission=car.transmission,
            fuel_type=car.fuel_type,
            description=car.description,
        )


class CarPage(BaseModel):
    cars: List[CarRecord]
    total_count: Optional[int] = None
