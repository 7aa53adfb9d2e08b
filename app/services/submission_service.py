# app/services/submission_service.py - validate, upload photos, insert or update the car
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from app.config import settings
from app.repository.car_repository import CarRepository
from app.schemas.car import CarPayload
from app.schemas.dashboard import DraftCar
from app.services.errors import GatewayError, PersistenceError, UploadError, ValidationError
from app.services.gateway import DataGateway
from app.services.image_staging import PendingPhoto
from app.services.listing_form import ListingFormController
from typing import List, Optional, Tuple
import asyncio
import logging
import re
import uuid

logger = logging.getLogger(__name__)

NO_PHOTOS_MESSAGE = "Please upload at least one photo of the vehicle."

_PRICE_JUNK = re.compile(r"[^0-9.]")
_PRICE_NUMBER = re.compile(r"\d+(?:\.\d*)?|\.\d+")
_LEADING_INT = re.compile(r"\s*([+-]?\d+)")
_EXTENSION_JUNK = re.compile(r"[^A-Za-z0-9]")


def split_name(name: str) -> Tuple[str, str]:
    """'Land Rover Defender' -> ('Land', 'Rover Defender'). Lossy: make and model have no real separator."""
    tokens = (name or "").split()
    if not tokens:
        return "", ""
    return tokens[0], " ".join(tokens[1:])


def parse_price(text: str) -> Decimal:
    """'$1,250.50 / day' -> Decimal('1250.50')"""
    match = _PRICE_NUMBER.match(_PRICE_JUNK.sub("", text or ""))
    if not match:
        raise ValidationError(f"Invalid price: {text!r}")
    try:
        return Decimal(match.group(0))
    except InvalidOperation:
        raise ValidationError(f"Invalid price: {text!r}")


def parse_year(text: str) -> int:
    match = _LEADING_INT.match(text or "")
    if not match:
        raise ValidationError(f"Invalid year: {text!r}")
    return int(match.group(1))


def build_payload(draft: DraftCar, images: List[str], owner_id: Optional[str]) -> CarPayload:
    make, model = split_name(draft.name)
    return CarPayload(
        make=make,
        model=model,
        price_per_day=parse_price(draft.price),
        year=parse_year(draft.year),
        images=images,
        mileage=draft.mileage,
        transmission=draft.transmission,
        fuel_type=draft.fuel_type,
        description=draft.description,
        user_id=owner_id,
    )


@dataclass
class SubmissionResult:
    created: bool
    car_id: Optional[str]
    images: List[str] = field(default_factory=list)


class SubmissionPipeline:
    def __init__(self, gateway: DataGateway, repository: CarRepository,
                 bucket: Optional[str] = None, prefix: Optional[str] = None):
        self.gateway = gateway
        self.repository = repository
        self.bucket = bucket or settings.images_bucket
        self.prefix = prefix if prefix is not None else settings.images_prefix

    def storage_path(self, photo: PendingPhoto) -> str:
        extension = _EXTENSION_JUNK.sub("", photo.extension).lower()
        filename = f"{uuid.uuid4().hex}.{extension}" if extension else uuid.uuid4().hex
        return f"{self.prefix}/{filename}" if self.prefix else filename

    async def _upload_one(self, photo: PendingPhoto) -> str:
        path = self.storage_path(photo)
        try:
            await self.gateway.upload_object(self.bucket, path, photo.content, photo.content_type)
        except GatewayError as e:
            logger.error(f"❌ Upload of {photo.filename} failed: {e}")
            raise UploadError(e.message)
        url = self.gateway.get_public_url(self.bucket, path)
        logger.debug(f"📤 {photo.filename} -> {url}")
        return url

    async def upload_photos(self, photos: List[PendingPhoto]) -> List[str]:
        """Concurrent uploads; the first failure aborts, finished objects stay in the bucket."""
        if not photos:
            return []
        return list(await asyncio.gather(*(self._upload_one(photo) for photo in photos)))

    async def submit(self, form: ListingFormController) -> SubmissionResult:
        if len(form.images) == 0:
            raise ValidationError(NO_PHOTOS_MESSAGE, title="Missing Photos")

        draft = form.draft.model_copy()
        # fail on bad numbers before anything is uploaded
        parse_price(draft.price)
        parse_year(draft.year)

        retained = form.images.retained_urls
        pending = form.images.pending_photos
        logger.info(f"🚀 Submitting {'update of ' + draft.id if draft.id else 'new car'}: "
                    f"{len(retained)} kept, {len(pending)} to upload")

        uploaded = await self.upload_photos(pending)
        images = retained + uploaded

        try:
            principal = await self.gateway.get_current_principal()
        except GatewayError as e:
            raise PersistenceError(e.message)

        payload = build_payload(draft, images, principal.id if principal else None)

        try:
            if draft.id:
                await self.repository.update(draft.id, payload)
                return SubmissionResult(created=False, car_id=draft.id, images=images)
            car_id = await self.repository.create(payload)
        except GatewayError as e:
            logger.error(f"❌ Saving car failed: {e}")
            raise PersistenceError(e.message)
        return SubmissionResult(created=True, car_id=car_id, images=images)
