import asyncio

import pytest

from app.repository.car_repository import CarRepository
from app.services.inventory_pager import InventoryPager


def make_pager(gateway, page_size=5):
    return InventoryPager(CarRepository(gateway, "cars"), page_size=page_size)


@pytest.mark.parametrize("page", [1, 2, 3])
def test_window_starts_at_page_offset(fleet_gateway, page):
    pager = make_pager(fleet_gateway)
    start, end = pager.window(page)
    assert start == (page - 1) * 5
    assert end - start + 1 == 5


async def test_twelve_cars_five_per_page(fleet_gateway):
    pager = make_pager(fleet_gateway)
    await pager.fetch_page()

    assert pager.total_count == 12
    assert pager.page_count == 3
    assert pager.show_controls is True
    assert pager.has_previous is False
    assert pager.has_next is True
    assert [car.id for car in pager.cars] == ["car-12", "car-11", "car-10", "car-9", "car-8"]

    await pager.set_page(3)

    assert fleet_gateway.calls[-1] == ("query", "cars", 10, 14)
    assert [car.id for car in pager.cars] == ["car-2", "car-1"]
    assert pager.has_next is False
    assert pager.has_previous is True


async def test_next_and_previous_are_disabled_at_the_ends(fleet_gateway):
    pager = make_pager(fleet_gateway)
    await pager.fetch_page()

    assert await pager.previous_page() is False
    assert pager.page == 1

    await pager.next_page()
    await pager.next_page()
    assert pager.page == 3
    queries = len(fleet_gateway.calls_named("query"))

    assert await pager.next_page() is False
    assert pager.page == 3
    assert len(fleet_gateway.calls_named("query")) == queries


async def test_set_page_only_fetches_on_change(fleet_gateway):
    pager = make_pager(fleet_gateway)
    assert await pager.set_page(1) is False
    assert fleet_gateway.calls == []

    with pytest.raises(ValueError):
        await pager.set_page(0)


async def test_fetch_failure_keeps_previous_state(fleet_gateway):
    pager = make_pager(fleet_gateway)
    await pager.fetch_page()
    before = list(pager.cars)

    fleet_gateway.fail("query", "connection reset")
    assert await pager.set_page(2) is False

    assert pager.cars == before
    assert pager.total_count == 12
    assert pager.fetch_failed is True
    assert pager.last_error.message == "connection reset"

    fleet_gateway.failures.clear()
    assert await pager.refresh() is True
    assert pager.fetch_failed is False
    assert pager.cars[0].id == "car-7"


async def test_missing_count_keeps_previous_total(fleet_gateway):
    pager = make_pager(fleet_gateway)
    await pager.fetch_page()
    fleet_gateway.report_count = False

    await pager.refresh()

    assert pager.total_count == 12


async def test_stale_response_is_discarded(fleet_gateway):
    pager = make_pager(fleet_gateway)
    gate = asyncio.Event()
    fleet_gateway.gates[5] = gate

    slow = asyncio.create_task(pager.set_page(2))
    await asyncio.sleep(0)
    assert await pager.set_page(3) is True

    gate.set()
    assert await slow is False

    assert pager.page == 3
    assert [car.id for car in pager.cars] == ["car-2", "car-1"]


async def test_small_inventory_hides_controls(gateway):
    pager = make_pager(gateway)
    await pager.fetch_page()
    assert pager.total_count == 0
    assert pager.page_count == 0
    assert pager.show_controls is False
    assert pager.has_next is False
