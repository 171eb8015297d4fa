from fastapi import APIRouter, Depends
from fastapi.responses import HTMLResponse
from taklifnoma.database.supabase_client import get_supabase, get_service_supabase
from taklifnoma.modules.invitations.schemas import InvitationCreate, InvitationUpdate, InvitationResponse
from taklifnoma.modules.invitations.service import InvitationService
from taklifnoma.core.dependencies import get_current_user_id, get_user_supabase
from supabase import Client
from typing import List, Dict

router = APIRouter(prefix="/invitations", tags=["invitations"])

# Shareable pages live outside the API prefix: /i/{slug}
public_router = APIRouter(tags=["public"])


def get_invitation_service(supabase: Client = Depends(get_user_supabase)) -> InvitationService:
    return InvitationService(supabase)


def get_public_invitation_service(
    supabase: Client = Depends(get_supabase),
    admin_supabase: Client = Depends(get_service_supabase),
) -> InvitationService:
    return InvitationService(supabase, admin_supabase)


@router.get("/public/{slug}", response_model=InvitationResponse)
async def get_public_invitation(
    slug: str,
    service: InvitationService = Depends(get_public_invitation_service),
):
    """Invitation details for the public page (active invitations only)."""
    return service.get_public_invitation(slug)


@router.post("", response_model=InvitationResponse, status_code=201)
async def create_invitation(
    invitation_data: InvitationCreate,
    user_data: Dict = Depends(get_current_user_id),
    service: InvitationService = Depends(get_invitation_service),
):
    return service.create_invitation(invitation_data, user_data["id"])


@router.get("", response_model=List[InvitationResponse])
async def list_invitations(
    limit: int = 20,
    offset: int = 0,
    user_data: Dict = Depends(get_current_user_id),
    service: InvitationService = Depends(get_invitation_service),
):
    return service.list_invitations(user_data["id"], limit=limit, offset=offset)


@router.get("/{invitation_id}", response_model=InvitationResponse)
async def get_invitation(
    invitation_id: str,
    user_data: Dict = Depends(get_current_user_id),
    service: InvitationService = Depends(get_invitation_service),
):
    return service.get_invitation(invitation_id, user_data["id"])


@router.put("/{invitation_id}", response_model=InvitationResponse)
async def update_invitation(
    invitation_id: str,
    invitation_data: InvitationUpdate,
    user_data: Dict = Depends(get_current_user_id),
    service: InvitationService = Depends(get_invitation_service),
):
    return service.update_invitation(invitation_id, invitation_data, user_data["id"])


@router.delete("/{invitation_id}", status_code=204)
async def delete_invitation(
    invitation_id: str,
    user_data: Dict = Depends(get_current_user_id),
    service: InvitationService = Depends(get_invitation_service),
):
    service.delete_invitation(invitation_id, user_data["id"])
    return None


@public_router.get("/i/{slug}", response_class=HTMLResponse)
async def invitation_page(
    slug: str,
    service: InvitationService = Depends(get_public_invitation_service),
):
    """Shareable invitation page rendered with the couple's template."""
    return HTMLResponse(service.render_public_page(slug))
