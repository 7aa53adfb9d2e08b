# app/services/listing_form.py - draft of the car being created or edited
from app.schemas.car import CarRecord
from app.schemas.dashboard import DraftCar, FormMode
from app.services.image_staging import ImageStagingBuffer
from typing import Optional
import logging

logger = logging.getLogger(__name__)

TEXT_FIELDS = ("name", "price", "year", "mileage", "transmission", "fuel_type", "description")


class ListingFormController:
    def __init__(self, images: Optional[ImageStagingBuffer] = None):
        self.draft = DraftCar()
        self.images = images or ImageStagingBuffer()
        self.focus_requested = False

    @property
    def editing_id(self) -> Optional[str]:
        return self.draft.id

    @property
    def mode(self) -> FormMode:
        return FormMode.EDITING if self.draft.id is not None else FormMode.CREATING

    def update_fields(self, **changes):
        unknown = set(changes) - set(TEXT_FIELDS)
        if unknown:
            raise ValueError(f"Unknown form fields: {', '.join(sorted(unknown))}")
        for name, value in changes.items():
            setattr(self.draft, name, "" if value is None else str(value))

    def start_editing(self, car: CarRecord):
        """Seed the form from a stored car; unsaved changes to a previous draft are dropped."""
        if self.draft.id is not None and self.draft.id != car.id:
            logger.info(f"✏️ Switching edit from {self.draft.id} to {car.id}")

        self.draft = DraftCar(
            id=car.id,
            name=" ".join(part for part in (car.make, car.model) if part),
            price=str(car.price_per_day),
            year=str(car.year),
            mileage=car.mileage,
            transmission=car.transmission,
            fuel_type=car.fuel_type,
            description=car.description,
        )
        self.images.seed(car.images)
        self.focus_requested = True

    def consume_focus_request(self) -> bool:
        requested, self.focus_requested = self.focus_requested, False
        return requested

    def reset(self):
        self.draft = DraftCar()
        self.images.clear()
        self.focus_requested = False

    def cancel(self):
        logger.info(f"↩️ Edit cancelled: {self.draft.id}")
        self.reset()
