# app/services/supabase_gateway.py - hosted backend (PostgREST + Storage + Auth) over httpx
import httpx
from fastapi.encoders import jsonable_encoder
from typing import Any, Dict, List, Optional, Tuple
from app.config import settings
from app.services.errors import GatewayError
from app.services.gateway import DataGateway, Principal
import logging

logger = logging.getLogger(__name__)


def parse_content_range_total(content_range: Optional[str]) -> Optional[int]:
    """'0-4/12' -> 12, '*/12' -> 12, '0-4/*' -> None"""
    if not content_range or "/" not in content_range:
        return None
    total = content_range.rsplit("/", 1)[1].strip()
    return int(total) if total.isdigit() else None


class SupabaseGateway(DataGateway):
    def __init__(
            self,
            url: Optional[str] = None,
            api_key: Optional[str] = None,
            access_token: Optional[str] = None,
            admin_emails: Optional[List[str]] = None,
            timeout: Optional[float] = None,
            transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = (url or settings.supabase_url).rstrip("/")
        self.api_key = api_key if api_key is not None else settings.supabase_anon_key
        self.access_token = access_token
        self.admin_emails = {e.lower() for e in (admin_emails if admin_emails is not None else settings.admin_emails)}
        self.timeout = timeout or settings.supabase_timeout
        self.transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(base_url=self.base_url, timeout=self.timeout, transport=self.transport)

    def _headers(self, extra: Optional[Dict[str, str]] = None) -> Dict[str, str]:
        headers = {
            "apikey": self.api_key,
            "Authorization": f"Bearer {self.access_token or self.api_key}",
        }
        if extra:
            headers.update(extra)
        return headers

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        try:
            body = response.json()
        except ValueError:
            body = None

        if isinstance(body, dict):
            for key in ("message", "error_description", "msg", "error"):
                if body.get(key):
                    return str(body[key])
        return response.text or f"HTTP {response.status_code}"

    async def _request(self, method: str, url: str, **kwargs) -> httpx.Response:
        try:
            async with self._client() as client:
                response = await client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            logger.error(f"❌ {method} {url} failed: {e}")
            raise GatewayError(str(e) or e.__class__.__name__)
        return response

    def _raise_for_status(self, response: httpx.Response, allowed: Tuple[int, ...] = ()):
        if response.is_success or response.status_code in allowed:
            return
        message = self._error_message(response)
        logger.error(f"❌ {response.request.method} {response.request.url.path} -> {response.status_code}: {message}")
        raise GatewayError(message, response.status_code)

    async def query(
            self,
            table: str,
            filters: Optional[Dict[str, Any]] = None,
            start: int = 0,
            end: Optional[int] = None,
            order_by: Optional[str] = None,
            descending: bool = False,
    ) -> Tuple[List[Dict[str, Any]], Optional[int]]:
        params = {"select": "*"}
        if order_by:
            params["order"] = f"{order_by}.{'desc' if descending else 'asc'}"
        for column, value in (filters or {}).items():
            params[column] = f"eq.{value}"

        headers = {"Prefer": "count=exact"}
        if end is not None:
            headers.update({"Range-Unit": "items", "Range": f"{start}-{end}"})
        elif start:
            headers.update({"Range-Unit": "items", "Range": f"{start}-"})

        response = await self._request("GET", f"/rest/v1/{table}", params=params, headers=self._headers(headers))
        # 416: window starts past the last row, the header still carries the total
        self._raise_for_status(response, allowed=(416,))

        total = parse_content_range_total(response.headers.get("content-range"))
        if response.status_code == 416:
            return [], total
        return response.json(), total

    async def insert(self, table: str, record: Dict[str, Any]) -> Dict[str, Any]:
        response = await self._request(
            "POST",
            f"/rest/v1/{table}",
            json=[jsonable_encoder(record)],
            headers=self._headers({"Prefer": "return=representation"}),
        )
        self._raise_for_status(response)
        rows = response.json() if response.content else []
        return rows[0] if rows else {}

    async def update(self, table: str, record_id: str, record: Dict[str, Any]) -> None:
        response = await self._request(
            "PATCH",
            f"/rest/v1/{table}",
            params={"id": f"eq.{record_id}"},
            json=jsonable_encoder(record),
            headers=self._headers({"Prefer": "return=minimal"}),
        )
        self._raise_for_status(response)

    async def delete(self, table: str, record_id: str) -> None:
        response = await self._request(
            "DELETE",
            f"/rest/v1/{table}",
            params={"id": f"eq.{record_id}"},
            headers=self._headers(),
        )
        self._raise_for_status(response)

    async def upload_object(self, bucket: str, path: str, content: bytes,
                            content_type: str = "application/octet-stream") -> None:
        response = await self._request(
            "POST",
            f"/storage/v1/object/{bucket}/{path}",
            content=content,
            headers=self._headers({
                "Content-Type": content_type,
                "x-upsert": "false",
                "cache-control": "max-age=3600",
            }),
        )
        self._raise_for_status(response)

    def get_public_url(self, bucket: str, path: str) -> str:
        return f"{self.base_url}/storage/v1/object/public/{bucket}/{path}"

    async def get_current_principal(self) -> Optional[Principal]:
        if not self.access_token:
            return None

        response = await self._request("GET", "/auth/v1/user", headers=self._headers())
        if response.status_code in (401, 403):
            return None
        self._raise_for_status(response)

        user = response.json()
        email = user.get("email")
        role = (user.get("app_metadata") or {}).get("role")
        is_admin = role == "admin" or (email or "").lower() in self.admin_emails
        return Principal(id=user["id"], email=email, is_admin=is_admin)
