from fastapi import APIRouter, Depends
from taklifnoma.modules.guests.schemas import GuestCreate, GuestUpdate, GuestResponse
from taklifnoma.modules.guests.service import GuestService
from taklifnoma.core.dependencies import get_current_user_id, get_user_supabase
from supabase import Client
from typing import List, Dict

router = APIRouter(prefix="/invitations/{invitation_id}/guests", tags=["guests"])


def get_guest_service(supabase: Client = Depends(get_user_supabase)) -> GuestService:
    return GuestService(supabase)


@router.get("", response_model=List[GuestResponse])
async def list_guests(
    invitation_id: str,
    user_data: Dict = Depends(get_current_user_id),
    service: GuestService = Depends(get_guest_service),
):
    return service.list_guests(invitation_id, user_data["id"])


@router.post("", response_model=GuestResponse, status_code=201)
async def add_guest(
    invitation_id: str,
    guest_data: GuestCreate,
    user_data: Dict = Depends(get_current_user_id),
    service: GuestService = Depends(get_guest_service),
):
    return service.add_guest(invitation_id, guest_data, user_data["id"])


@router.put("/{guest_id}", response_model=GuestResponse)
async def update_guest(
    invitation_id: str,
    guest_id: str,
    guest_data: GuestUpdate,
    user_data: Dict = Depends(get_current_user_id),
    service: GuestService = Depends(get_guest_service),
):
    return service.update_guest(invitation_id, guest_id, guest_data, user_data["id"])


@router.delete("/{guest_id}", status_code=204)
async def delete_guest(
    invitation_id: str,
    guest_id: str,
    user_data: Dict = Depends(get_current_user_id),
    service: GuestService = Depends(get_guest_service),
):
    service.delete_guest(invitation_id, guest_id, user_data["id"])
    return None
