from fastapi import APIRouter, Depends
from taklifnoma.modules.profiles.schemas import ProfileUpdate, ProfileResponse
from taklifnoma.modules.profiles.service import ProfileService
from taklifnoma.core.dependencies import get_current_user_id, get_user_supabase
from supabase import Client
from typing import Dict

router = APIRouter(prefix="/profile", tags=["profile"])


def get_profile_service(supabase: Client = Depends(get_user_supabase)) -> ProfileService:
    return ProfileService(supabase)


@router.get("", response_model=ProfileResponse)
async def get_profile(
    user_data: Dict = Depends(get_current_user_id),
    service: ProfileService = Depends(get_profile_service),
):
    """Profile of the signed-in user"""
    return service.get_profile(user_data["id"])


@router.put("", response_model=ProfileResponse)
async def update_profile(
    profile_data: ProfileUpdate,
    user_data: Dict = Depends(get_current_user_id),
    service: ProfileService = Depends(get_profile_service),
):
    return service.update_profile(user_data["id"], profile_data)
