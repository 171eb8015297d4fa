from datetime import date
from postgrest.types import ReturnMethod
from supabase import Client
from taklifnoma.modules.guests.service import ensure_invitation_owner
from taklifnoma.modules.rsvps.schemas import RsvpCreate, RsvpSubmitted, RsvpResponse, RsvpSummary
from typing import List, Optional
from fastapi import HTTPException
import logging

logger = logging.getLogger(__name__)


class RsvpService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def submit_rsvp(self, slug: str, rsvp_data: RsvpCreate, today: Optional[date] = None) -> RsvpSubmitted:
        """Record a guest's answer for an active invitation, before its RSVP deadline."""
        result = self.supabase.table("invitations")\
            .select("id, rsvp_deadline")\
            .eq("slug", slug)\
            .eq("is_active", True)\
            .maybe_single()\
            .execute()
        if not result or not result.data:
            raise HTTPException(status_code=404, detail="Invitation not found")
        invitation = result.data

        deadline = invitation.get("rsvp_deadline")
        if deadline and (today or date.today()) > date.fromisoformat(str(deadline)):
            raise HTTPException(status_code=400, detail="RSVP deadline has passed")

        payload = rsvp_data.model_dump()
        payload["invitation_id"] = invitation["id"]
        try:
            # Anonymous guests may insert but not read rsvps, so ask for no representation
            self.supabase.table("rsvps").insert(payload, returning=ReturnMethod.minimal).execute()
        except Exception as e:
            logger.error(f"RSVP insert failed for invitation {invitation['id']}: {e}")
            raise HTTPException(status_code=500, detail="Failed to record RSVP")

        logger.info(f"RSVP recorded for invitation {invitation['id']}")
        return RsvpSubmitted(message="Thank you, your RSVP has been recorded", invitation_id=invitation["id"])

    def list_rsvps(self, invitation_id: str, user_id: str) -> List[RsvpResponse]:
        ensure_invitation_owner(self.supabase, invitation_id, user_id)
        result = self.supabase.table("rsvps")\
            .select("*")\
            .eq("invitation_id", invitation_id)\
            .order("created_at", desc=True)\
            .execute()
        return [RsvpResponse(**r) for r in result.data or []]

    def summarize(self, invitation_id: str, user_id: str) -> RsvpSummary:
        rsvps = self.list_rsvps(invitation_id, user_id)
        attending = [r for r in rsvps if r.will_attend]
        plus_ones = sum(1 for r in attending if r.plus_one_attending)
        return RsvpSummary(
            total=len(rsvps),
            attending=len(attending),
            declined=len(rsvps) - len(attending),
            plus_ones=plus_ones,
            expected_guests=len(attending) + plus_ones,
        )
