"""Dashboard statistics endpoint."""

from fastapi import APIRouter, Depends

from backend.invoicer.core.settings import get_settings
from backend.invoicer.core.time import local_today
from backend.invoicer.dependencies.auth import get_current_user
from backend.invoicer.dependencies.services import get_store
from backend.invoicer.models.user import User
from backend.invoicer.schemas.dashboard import DashboardStats
from backend.invoicer.services.dashboard import get_dashboard_stats
from backend.invoicer.services.storage import EntityStore

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("/stats", response_model=DashboardStats)
async def read_dashboard_stats(store: EntityStore = Depends(get_store), current_user: User = Depends(get_current_user)):
    today = local_today(get_settings().timezone)
    return get_dashboard_stats(store, owner_id=current_user.id, today=today)
