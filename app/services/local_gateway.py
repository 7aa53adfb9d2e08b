# app/services/local_gateway.py - self-hosted backend: SQLAlchemy tables + media directory
from sqlalchemy import select, func, update as sa_update, delete as sa_delete
from sqlalchemy.exc import SQLAlchemyError
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple
from app.config import settings
from app.models.car import Car
from app.services.errors import GatewayError
from app.services.gateway import DataGateway, Principal
import asyncio
import logging

logger = logging.getLogger(__name__)


def resolve_object_path(media_root: Path, bucket: str, path: str) -> Path:
    """Path of a stored object; ValueError when it would escape the media root."""
    root = Path(media_root).resolve()
    target = (root / bucket / path).resolve()
    if target == root or not target.is_relative_to(root):
        raise ValueError(f"Invalid object path: {bucket}/{path}")
    return target


class LocalGateway(DataGateway):
    tables = {"cars": Car}

    def __init__(self, session_factory=None, media_root: Optional[str] = None,
                 public_base_url: Optional[str] = None, principal: Optional[Principal] = None):
        if session_factory is None:
            from app.database import async_session
            session_factory = async_session
        self.session_factory = session_factory
        self.media_root = Path(media_root or settings.media_root)
        self.public_base_url = (public_base_url or settings.public_base_url).rstrip("/")
        self.principal = principal or Principal(
            id=settings.local_user_id,
            email=settings.local_user_email,
            is_admin=True,
        )

    def _model(self, table: str):
        model = self.tables.get(table)
        if model is None:
            raise GatewayError(f"Unknown table: {table}", 404)
        return model

    @staticmethod
    def _column(model, name: str):
        if name not in model.__table__.columns:
            raise GatewayError(f"Could not find the '{name}' column of '{model.__tablename__}'", 400)
        return getattr(model, name)

    def _values(self, model, record: Dict[str, Any]) -> Dict[str, Any]:
        for name in record:
            self._column(model, name)
        return dict(record)

    @staticmethod
    def _to_dict(obj) -> Dict[str, Any]:
        return {column.name: getattr(obj, column.key) for column in obj.__table__.columns}

    async def query(
            self,
            table: str,
            filters: Optional[Dict[str, Any]] = None,
            start: int = 0,
            end: Optional[int] = None,
            order_by: Optional[str] = None,
            descending: bool = False,
    ) -> Tuple[List[Dict[str, Any]], Optional[int]]:
        model = self._model(table)
        conditions = [self._column(model, name) == value for name, value in (filters or {}).items()]

        stmt = select(model).offset(start)
        count_stmt = select(func.count()).select_from(model)
        if conditions:
            stmt = stmt.where(*conditions)
            count_stmt = count_stmt.where(*conditions)
        if order_by:
            column = self._column(model, order_by)
            stmt = stmt.order_by(column.desc() if descending else column.asc())
        if end is not None:
            stmt = stmt.limit(max(end - start + 1, 0))

        try:
            async with self.session_factory() as session:
                total = (await session.execute(count_stmt)).scalar_one()
                rows = (await session.execute(stmt)).scalars().all()
        except SQLAlchemyError as e:
            logger.error(f"❌ query({table}) failed: {e}")
            raise GatewayError(str(e))

        return [self._to_dict(row) for row in rows], total

    async def insert(self, table: str, record: Dict[str, Any]) -> Dict[str, Any]:
        model = self._model(table)
        obj = model(**self._values(model, record))
        try:
            async with self.session_factory() as session:
                session.add(obj)
                await session.commit()
                await session.refresh(obj)
        except SQLAlchemyError as e:
            logger.error(f"❌ insert({table}) failed: {e}")
            raise GatewayError(str(e))
        return self._to_dict(obj)

    async def update(self, table: str, record_id: str, record: Dict[str, Any]) -> None:
        model = self._model(table)
        values = self._values(model, record)
        try:
            async with self.session_factory() as session:
                await session.execute(sa_update(model).where(model.id == record_id).values(**values))
                await session.commit()
        except SQLAlchemyError as e:
            logger.error(f"❌ update({table}, {record_id}) failed: {e}")
            raise GatewayError(str(e))

    async def delete(self, table: str, record_id: str) -> None:
        model = self._model(table)
        try:
            async with self.session_factory() as session:
                await session.execute(sa_delete(model).where(model.id == record_id))
                await session.commit()
        except SQLAlchemyError as e:
            logger.error(f"❌ delete({table}, {record_id}) failed: {e}")
            raise GatewayError(str(e))

    async def upload_object(self, bucket: str, path: str, content: bytes,
                            content_type: str = "application/octet-stream") -> None:
        try:
            target = resolve_object_path(self.media_root, bucket, path)
        except ValueError as e:
            raise GatewayError(str(e), 400)

        if target.exists():
            raise GatewayError("The resource already exists", 409)

        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            await asyncio.to_thread(target.write_bytes, content)
        except OSError as e:
            logger.error(f"❌ upload {bucket}/{path} failed: {e}")
            raise GatewayError(str(e))
        logger.debug(f"📦 stored {bucket}/{path} ({len(content)} bytes)")

    def get_public_url(self, bucket: str, path: str) -> str:
        return f"{self.public_base_url}/storage/{bucket}/{path}"

    async def get_current_principal(self) -> Optional[Principal]:
        return self.principal
