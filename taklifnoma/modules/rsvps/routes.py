from fastapi import APIRouter, Depends
from taklifnoma.database.supabase_client import get_supabase
from taklifnoma.modules.rsvps.schemas import RsvpCreate, RsvpSubmitted, RsvpResponse, RsvpSummary
from taklifnoma.modules.rsvps.service import RsvpService
from taklifnoma.core.dependencies import get_current_user_id, get_user_supabase
from supabase import Client
from typing import List, Dict

router = APIRouter(prefix="/invitations", tags=["rsvps"])


def get_rsvp_service(supabase: Client = Depends(get_user_supabase)) -> RsvpService:
    return RsvpService(supabase)


def get_public_rsvp_service(supabase: Client = Depends(get_supabase)) -> RsvpService:
    return RsvpService(supabase)


@router.post("/public/{slug}/rsvp", response_model=RsvpSubmitted, status_code=201)
async def submit_rsvp(
    slug: str,
    rsvp_data: RsvpCreate,
    service: RsvpService = Depends(get_public_rsvp_service),
):
    """Guest RSVP; no sign-in required."""
    return service.submit_rsvp(slug, rsvp_data)


@router.get("/{invitation_id}/rsvps", response_model=List[RsvpResponse])
async def list_rsvps(
    invitation_id: str,
    user_data: Dict = Depends(get_current_user_id),
    service: RsvpService = Depends(get_rsvp_service),
):
    return service.list_rsvps(invitation_id, user_data["id"])


@router.get("/{invitation_id}/rsvps/summary", response_model=RsvpSummary)
async def rsvp_summary(
    invitation_id: str,
    user_data: Dict = Depends(get_current_user_id),
    service: RsvpService = Depends(get_rsvp_service),
):
    return service.summarize(invitation_id, user_data["id"])
