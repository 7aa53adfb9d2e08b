# app/dependencies.py - gateway, admin guard and per-admin dashboard for the routes
from fastapi import Depends, HTTPException, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from app.config import settings
from app.services.dashboard_service import AdminDashboard
from app.services.errors import GatewayError
from app.services.gateway import DataGateway, Principal
from app.services.local_gateway import LocalGateway
from app.services.supabase_gateway import SupabaseGateway
from typing import Optional
import logging

logger = logging.getLogger(__name__)
bearer = HTTPBearer(auto_error=False)


def make_gateway(access_token: Optional[str] = None) -> DataGateway:
    if settings.backend == "local":
        return LocalGateway()
    if settings.backend == "supabase":
        return SupabaseGateway(access_token=access_token)
    raise ValueError(f"Unknown backend: {settings.backend}")


def get_gateway(credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer)) -> DataGateway:
    return make_gateway(credentials.credentials if credentials else None)


async def get_principal(gateway: DataGateway = Depends(get_gateway)) -> Principal:
    try:
        principal = await gateway.get_current_principal()
    except GatewayError as e:
        logger.error(f"❌ Principal lookup failed: {e}")
        raise HTTPException(status_code=502, detail=e.message)

    if principal is None:
        raise HTTPException(status_code=401, detail="Not signed in")
    return principal


async def require_admin(principal: Principal = Depends(get_principal)) -> Principal:
    if not principal.is_admin:
        logger.warning(f"🚫 Dashboard access denied for {principal.email or principal.id}")
        raise HTTPException(status_code=403, detail="ACCESS DENIED")
    return principal


async def get_dashboard(
        request: Request,
        principal: Principal = Depends(require_admin),
        gateway: DataGateway = Depends(get_gateway),
) -> AdminDashboard:
    return await request.app.state.dashboards.get(principal, gateway)
