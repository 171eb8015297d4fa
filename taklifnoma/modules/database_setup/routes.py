from fastapi import APIRouter, Depends
from taklifnoma.database.supabase_client import get_service_supabase
from taklifnoma.modules.database_setup.schemas import SetupResult, DatabaseStatus
from taklifnoma.modules.database_setup.service import DatabaseSetupService
from taklifnoma.core.dependencies import get_current_user_id
from supabase import Client
from typing import Dict

router = APIRouter(prefix="/database", tags=["database"])


def get_setup_service(supabase: Client = Depends(get_service_supabase)) -> DatabaseSetupService:
    return DatabaseSetupService(supabase)


@router.get("/status", response_model=DatabaseStatus)
async def database_status(service: DatabaseSetupService = Depends(get_setup_service)):
    """Report which of the required tables are reachable."""
    return service.check_database_status()


@router.post("/setup", response_model=SetupResult)
async def setup_database(
    user_data: Dict = Depends(get_current_user_id),
    service: DatabaseSetupService = Depends(get_setup_service),
):
    """Provision tables, RLS policies, indexes and triggers."""
    return service.setup_database()


@router.post("/reset", response_model=SetupResult)
async def reset_database(
    user_data: Dict = Depends(get_current_user_id),
    service: DatabaseSetupService = Depends(get_setup_service),
):
    return service.reset_database()
