from decimal import Decimal

import pytest

from app.repository.car_repository import CarRepository
from app.schemas.car import CarRecord
from app.services.errors import PersistenceError, UploadError, ValidationError
from app.services.listing_form import ListingFormController
from app.services.submission_service import (
    SubmissionPipeline,
    parse_price,
    parse_year,
    split_name,
)
from conftest import FakeGateway, make_car_row, photo


def make_pipeline(gateway):
    return SubmissionPipeline(gateway, CarRepository(gateway, "cars"), bucket="car-images", prefix="cars")


def filled_form(**fields) -> ListingFormController:
    form = ListingFormController()
    values = dict(name="Land Rover Defender", price="$120.50 / day", year="2021",
                  mileage="30 000 km", transmission="Manual", fuel_type="Diesel",
                  description="Ready for off-road")
    values.update(fields)
    form.update_fields(**values)
    return form


@pytest.mark.parametrize("name, expected", [
    ("Land Rover", ("Land", "Rover")),
    ("Land   Rover  Defender", ("Land", "Rover Defender")),
    ("Tesla", ("Tesla", "")),
    ("  Mazda 3 ", ("Mazda", "3")),
    ("", ("", "")),
])
def test_split_name(name, expected):
    assert split_name(name) == expected


@pytest.mark.parametrize("text, expected", [
    ("120", Decimal("120")),
    ("$1,250.50 / day", Decimal("1250.50")),
    ("12.5.3", Decimal("12.5")),
    (".75", Decimal(".75")),
])
def test_parse_price(text, expected):
    assert parse_price(text) == expected


@pytest.mark.parametrize("text", ["", "free", "..."])
def test_parse_price_rejects_text_without_digits(text):
    with pytest.raises(ValidationError):
        parse_price(text)


def test_parse_year():
    assert parse_year("2020") == 2020
    assert parse_year(" 2019 facelift") == 2019
    with pytest.raises(ValidationError):
        parse_year("new")


async def test_no_photos_fails_before_any_network_call(gateway):
    form = filled_form()

    with pytest.raises(ValidationError) as exc:
        await make_pipeline(gateway).submit(form)

    assert exc.value.title == "Missing Photos"
    assert gateway.calls == []


async def test_invalid_price_fails_before_uploading(gateway):
    form = filled_form(price="call us")
    form.images.add_files([photo()])

    with pytest.raises(ValidationError):
        await make_pipeline(gateway).submit(form)

    assert gateway.calls_named("upload") == []


async def test_create_uploads_photos_and_inserts(gateway):
    form = filled_form()
    form.images.add_files([photo("front.JPG", b"front"), photo("back.png", b"back")])

    result = await make_pipeline(gateway).submit(form)

    assert result.created is True
    assert result.car_id == gateway.rows[0]["id"]

    uploads = gateway.calls_named("upload")
    assert len(uploads) == 2
    paths = [path for _, bucket, path in uploads]
    assert all(bucket == "car-images" for _, bucket, _ in uploads)
    assert sorted(p.rsplit(".", 1)[1] for p in paths) == ["jpg", "png"]
    assert all(p.startswith("cars/") for p in paths)
    assert len(set(paths)) == 2

    [(_, table, record)] = gateway.calls_named("insert")
    assert table == "cars"
    assert record["make"] == "Land"
    assert record["model"] == "Rover Defender"
    assert record["price_per_day"] == Decimal("120.50")
    assert record["year"] == 2021
    assert record["user_id"] == "admin-1"
    assert record["images"] == result.images
    assert [gateway.objects[("car-images", url.split("car-images/", 1)[1])] for url in record["images"]] == [
        b"front", b"back"
    ]


async def test_retained_urls_come_before_new_uploads(gateway):
    form = ListingFormController()
    form.start_editing(CarRecord.model_validate(make_car_row(
        4, images=["https://cdn/1.jpg", "https://cdn/2.jpg", "https://cdn/3.jpg"]
    )))
    form.images.add_files([photo("new.jpg")])
    form.images.remove_at(1)

    result = await make_pipeline(gateway).submit(form)

    assert result.created is False
    assert result.images[:2] == ["https://cdn/1.jpg", "https://cdn/3.jpg"]
    assert result.images[2].startswith("https://storage.example.com/car-images/cars/")
    [(_, _, car_id, record)] = gateway.calls_named("update")
    assert car_id == "car-4"
    assert record["images"] == result.images


async def test_one_failed_upload_aborts_without_insert(gateway):
    gateway.failing_uploads.add(b"broken")
    form = filled_form()
    form.images.add_files([photo("ok.jpg", b"fine"), photo("bad.jpg", b"broken")])
    draft_before = form.draft.model_copy()

    with pytest.raises(UploadError) as exc:
        await make_pipeline(gateway).submit(form)

    assert "Payload too large" in exc.value.message
    assert gateway.calls_named("insert") == []
    assert form.draft == draft_before
    assert len(form.images.pending_photos) == 2


async def test_unmodified_edit_round_trips_images_price_and_year(gateway):
    stored = CarRecord.model_validate(make_car_row(
        7, make="Land", model="Rover", price_per_day="85.00", year=2018,
        images=["https://cdn/x.jpg", "https://cdn/y.jpg"],
    ))
    form = ListingFormController()
    form.start_editing(stored)

    await make_pipeline(gateway).submit(form)

    [(_, _, car_id, record)] = gateway.calls_named("update")
    assert car_id == "car-7"
    assert record["images"] == stored.images
    assert record["price_per_day"] == stored.price_per_day
    assert record["year"] == stored.year
    assert (record["make"], record["model"]) == ("Land", "Rover")
    assert gateway.calls_named("upload") == []


async def test_multi_word_make_does_not_round_trip(gateway):
    stored = CarRecord.model_validate(make_car_row(8, make="Land Rover", model="Defender"))
    form = ListingFormController()
    form.start_editing(stored)

    await make_pipeline(gateway).submit(form)

    [(_, _, _, record)] = gateway.calls_named("update")
    assert (record["make"], record["model"]) == ("Land", "Rover Defender")


async def test_persistence_failure(gateway):
    gateway.fail("insert", "duplicate key value")
    form = filled_form()
    form.images.seed(["https://cdn/1.jpg"])

    with pytest.raises(PersistenceError) as exc:
        await make_pipeline(gateway).submit(form)

    assert exc.value.message == "duplicate key value"
    assert exc.value.title == "Operation Failed"


async def test_unknown_owner_is_left_out_of_the_record():
    gateway = FakeGateway(principal=None)
    form = filled_form()
    form.images.seed(["https://cdn/1.jpg"])

    await make_pipeline(gateway).submit(form)

    [(_, _, record)] = gateway.calls_named("insert")
    assert "user_id" not in record
