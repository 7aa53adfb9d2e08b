# app/services/gateway.py - contract of the remote data gateway
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple


@dataclass(frozen=True)
class Principal:
    id: str
    email: Optional[str] = None
    is_admin: bool = False


class DataGateway(ABC):
    """Relational tables, an object store and the signed-in principal.

    Every method raises ``GatewayError`` on failure.
    """

    @abstractmethod
    async def query(
            self,
            table: str,
            filters: Optional[Dict[str, Any]] = None,
            start: int = 0,
            end: Optional[int] = None,
            order_by: Optional[str] = None,
            descending: bool = False,
    ) -> Tuple[List[Dict[str, Any]], Optional[int]]:
        """Rows in the inclusive window [start, end] plus the exact total count."""

    @abstractmethod
    async def insert(self, table: str, record: Dict[str, Any]) -> Dict[str, Any]:
        ...

    @abstractmethod
    async def update(self, table: str, record_id: str, record: Dict[str, Any]) -> None:
        ...

    @abstractmethod
    async def delete(self, table: str, record_id: str) -> None:
        ...

    @abstractmethod
    async def upload_object(self, bucket: str, path: str, content: bytes,
                            content_type: str = "application/octet-stream") -> None:
        ...

    @abstractmethod
    def get_public_url(self, bucket: str, path: str) -> str:
        ...

    @abstractmethod
    async def get_current_principal(self) -> Optional[Principal]:
        ...
