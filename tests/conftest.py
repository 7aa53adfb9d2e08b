import asyncio
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional, Tuple

import pytest

from app.services.errors import GatewayError
from app.services.gateway import DataGateway, Principal
from app.services.image_staging import PendingPhoto

BASE_TIME = datetime(2026, 1, 1, tzinfo=timezone.utc)
ADMIN = Principal(id="admin-1", email="admin@example.com", is_admin=True)


def make_car_row(n: int, **overrides) -> Dict[str, Any]:
    row = {
        "id": f"car-{n}",
        "make": "Toyota",
        "model": f"Corolla {n}",
        "year": 2010 + n,
        "price_per_day": 40 + n,
        "images": [f"https://cdn.example.com/cars/{n}.jpg"],
        "mileage": f"{n * 1000} km",
        "transmission": "Automatic",
        "fuel_type": "Petrol",
        "description": f"Car number {n}",
        "user_id": ADMIN.id,
        "created_at": BASE_TIME + timedelta(hours=n),
    }
    row.update(overrides)
    return row


def photo(name: str = "front.jpg", content: bytes = b"jpeg-bytes") -> PendingPhoto:
    return PendingPhoto(filename=name, content=content, content_type="image/jpeg")


class FakeGateway(DataGateway):
    """In-memory tables and bucket that record every call."""

    def __init__(self, rows: Optional[List[Dict[str, Any]]] = None, principal: Optional[Principal] = ADMIN):
        self.rows = [dict(row) for row in rows or []]
        self.principal = principal
        self.calls: List[Tuple] = []
        self.objects: Dict[Tuple[str, str], bytes] = {}
        self.failures: Dict[str, GatewayError] = {}
        self.failing_uploads = set()
        self.gates: Dict[int, asyncio.Event] = {}
        self.report_count = True
        self._next_id = 1000

    def fail(self, operation: str, message: str = "boom", status_code: int = 500):
        self.failures[operation] = GatewayError(message, status_code)

    def calls_named(self, name: str) -> List[Tuple]:
        return [call for call in self.calls if call[0] == name]

    def _check(self, operation: str):
        if operation in self.failures:
            raise self.failures[operation]

    async def query(self, table, filters=None, start=0, end=None, order_by=None, descending=False):
        self.calls.append(("query", table, start, end))
        gate = self.gates.get(start)
        if gate is not None:
            await gate.wait()
        self._check("query")

        rows = list(self.rows)
        if order_by:
            rows.sort(key=lambda row: row[order_by], reverse=descending)
        window = rows[start:] if end is None else rows[start:end + 1]
        return [dict(row) for row in window], len(self.rows) if self.report_count else None

    async def insert(self, table, record):
        self.calls.append(("insert", table, dict(record)))
        self._check("insert")
        self._next_id += 1
        row = dict(record)
        row["id"] = f"car-{self._next_id}"
        row["created_at"] = BASE_TIME + timedelta(days=365, seconds=self._next_id)
        self.rows.append(row)
        return dict(row)

    async def update(self, table, record_id, record):
        self.calls.append(("update", table, record_id, dict(record)))
        self._check("update")
        for row in self.rows:
            if row["id"] == record_id:
                row.update(record)

    async def delete(self, table, record_id):
        self.calls.append(("delete", table, record_id))
        self._check("delete")
        self.rows = [row for row in self.rows if row["id"] != record_id]

    async def upload_object(self, bucket, path, content, content_type="application/octet-stream"):
        self.calls.append(("upload", bucket, path))
        self._check("upload")
        if content in self.failing_uploads:
            raise GatewayError("Payload too large", 413)
        self.objects[(bucket, path)] = content

    def get_public_url(self, bucket, path):
        return f"https://storage.example.com/{bucket}/{path}"

    async def get_current_principal(self):
        self.calls.append(("principal",))
        self._check("principal")
        return self.principal


@pytest.fixture
def gateway():
    return FakeGateway()


@pytest.fixture
def fleet_gateway():
    """Twelve cars, car-12 is the newest."""
    return FakeGateway([make_car_row(n) for n in range(1, 13)])
