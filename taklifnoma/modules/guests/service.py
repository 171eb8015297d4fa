from supabase import Client
from taklifnoma.modules.guests.schemas import GuestCreate, GuestUpdate, GuestResponse
from typing import List
from fastapi import HTTPException
import logging

logger = logging.getLogger(__name__)


def ensure_invitation_owner(supabase: Client, invitation_id: str, user_id: str) -> None:
    """404 unless the invitation exists and belongs to the user."""
    result = supabase.table("invitations")\
        .select("id")\
        .eq("id", invitation_id)\
        .eq("user_id", user_id)\
        .execute()
    if not result.data:
        raise HTTPException(status_code=404, detail="Invitation not found")


class GuestService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def add_guest(self, invitation_id: str, guest_data: GuestCreate, user_id: str) -> GuestResponse:
        ensure_invitation_owner(self.supabase, invitation_id, user_id)
        payload = guest_data.model_dump()
        payload["invitation_id"] = invitation_id
        try:
            result = self.supabase.table("guests").insert(payload).execute()
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))
        if not result.data:
            raise HTTPException(status_code=500, detail="Failed to add guest")
        return GuestResponse(**result.data[0])

    def list_guests(self, invitation_id: str, user_id: str) -> List[GuestResponse]:
        ensure_invitation_owner(self.supabase, invitation_id, user_id)
        result = self.supabase.table("guests")\
            .select("*")\
            .eq("invitation_id", invitation_id)\
            .order("name")\
            .execute()
        return [GuestResponse(**g) for g in result.data or []]

    def update_guest(self, invitation_id: str, guest_id: str, guest_data: GuestUpdate, user_id: str) -> GuestResponse:
        ensure_invitation_owner(self.supabase, invitation_id, user_id)
        update_data = guest_data.model_dump(exclude_unset=True)
        if not update_data:
            raise HTTPException(status_code=400, detail="Nothing to update")
        result = self.supabase.table("guests")\
            .update(update_data)\
            .eq("id", guest_id)\
            .eq("invitation_id", invitation_id)\
            .execute()
        if not result.data:
            raise HTTPException(status_code=404, detail="Guest not found")
        return GuestResponse(**result.data[0])

    def delete_guest(self, invitation_id: str, guest_id: str, user_id: str) -> None:
        ensure_invitation_owner(self.supabase, invitation_id, user_id)
        result = self.supabase.table("guests")\
            .delete()\
            .eq("id", guest_id)\
            .eq("invitation_id", invitation_id)\
            .execute()
        if not result.data:
            raise HTTPException(status_code=404, detail="Guest not found")
        logger.info(f"Guest {guest_id} removed from invitation {invitation_id}")
