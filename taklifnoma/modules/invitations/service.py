import re
import secrets
import unicodedata
from supabase import Client
from taklifnoma.config import settings
from taklifnoma.modules.invitations.schemas import InvitationCreate, InvitationUpdate, InvitationResponse
from taklifnoma.modules.templates.editor import render_invitation
from taklifnoma.modules.templates.local_store import is_local_id
from taklifnoma.modules.templates.schemas import TemplateConfig
from typing import List, Optional, Dict, Any
from fastapi import HTTPException
from pydantic import ValidationError
import logging

logger = logging.getLogger(__name__)

TABLE = "invitations"
UNIQUE_VIOLATION_CODE = "23505"
SLUG_ATTEMPTS = 5


def slugify(value: str) -> str:
    value = unicodedata.normalize("NFKD", value).encode("ascii", "ignore").decode("ascii")
    value = re.sub(r"['`’]", "", value.lower())
    return re.sub(r"[^a-z0-9]+", "-", value).strip("-")


def make_slug(groom_name: str, bride_name: str) -> str:
    base = "-".join(p for p in (slugify(groom_name), slugify(bride_name)) if p) or "invitation"
    return f"{base}-{secrets.token_hex(3)}"


def _to_response(row: Dict[str, Any]) -> InvitationResponse:
    invitation = InvitationResponse(**row)
    invitation.share_url = settings.invitation_url(invitation.slug)
    return invitation


class InvitationService:
    def __init__(self, supabase: Client, admin_supabase: Optional[Client] = None):
        self.supabase = supabase
        # Public page work (view counter, private template lookup) needs to bypass RLS
        self.admin_supabase = admin_supabase or supabase

    def _check_custom_template(self, custom_template_id: Optional[str], user_id: str) -> None:
        if not custom_template_id:
            return
        if is_local_id(custom_template_id):
            raise HTTPException(
                status_code=400,
                detail="Template is only stored locally; sync it before using it in an invitation"
            )
        result = self.supabase.table("custom_templates")\
            .select("id, user_id, is_public")\
            .eq("id", custom_template_id)\
            .maybe_single()\
            .execute()
        row = result.data if result else None
        if not row or (row.get("user_id") != user_id and not row.get("is_public")):
            raise HTTPException(status_code=404, detail="Custom template not found")

    def create_invitation(self, invitation_data: InvitationCreate, user_id: str) -> InvitationResponse:
        self._check_custom_template(invitation_data.custom_template_id, user_id)
        payload = invitation_data.model_dump(mode="json")
        payload["user_id"] = user_id

        for attempt in range(SLUG_ATTEMPTS):
            payload["slug"] = make_slug(invitation_data.groom_name, invitation_data.bride_name)
            try:
                result = self.supabase.table(TABLE).insert(payload).execute()
            except Exception as e:
                if getattr(e, "code", None) == UNIQUE_VIOLATION_CODE:
                    logger.warning(f"Slug collision on {payload['slug']}, retrying")
                    continue
                raise HTTPException(status_code=500, detail=str(e))
            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to create invitation")
            logger.info(f"Invitation {result.data[0]['id']} created with slug {payload['slug']}")
            return _to_response(result.data[0])

        raise HTTPException(status_code=409, detail="Could not allocate a unique invitation link")

    def list_invitations(self, user_id: str, limit: int = 20, offset: int = 0) -> List[InvitationResponse]:
        try:
            result = self.supabase.table(TABLE)\
                .select("*")\
                .eq("user_id", user_id)\
                .order("created_at", desc=True)\
                .limit(limit)\
                .offset(offset)\
                .execute()
            return [_to_response(row) for row in result.data or []]
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def get_invitation(self, invitation_id: str, user_id: str) -> InvitationResponse:
        result = self.supabase.table(TABLE)\
            .select("*")\
            .eq("id", invitation_id)\
            .eq("user_id", user_id)\
            .maybe_single()\
            .execute()
        if not result or not result.data:
            raise HTTPException(status_code=404, detail="Invitation not found")
        return _to_response(result.data)

    def update_invitation(self, invitation_id: str, invitation_data: InvitationUpdate, user_id: str) -> InvitationResponse:
        update_data = invitation_data.model_dump(mode="json", exclude_unset=True)
        if not update_data:
            raise HTTPException(status_code=400, detail="Nothing to update")
        if "custom_template_id" in update_data:
            self._check_custom_template(update_data["custom_template_id"], user_id)
        try:
            result = self.supabase.table(TABLE)\
                .update(update_data)\
                .eq("id", invitation_id)\
                .eq("user_id", user_id)\
                .execute()
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))
        if not result.data:
            raise HTTPException(status_code=404, detail="Invitation not found")
        return _to_response(result.data[0])

    def delete_invitation(self, invitation_id: str, user_id: str) -> None:
        """Delete an invitation; guests and RSVPs go with it (cascade)."""
        result = self.supabase.table(TABLE)\
            .delete()\
            .eq("id", invitation_id)\
            .eq("user_id", user_id)\
            .execute()
        if not result.data:
            raise HTTPException(status_code=404, detail="Invitation not found")

    def get_public_invitation(self, slug: str) -> InvitationResponse:
        result = self.supabase.table(TABLE)\
            .select("*")\
            .eq("slug", slug)\
            .eq("is_active", True)\
            .maybe_single()\
            .execute()
        if not result or not result.data:
            raise HTTPException(status_code=404, detail="Invitation not found")
        return _to_response(result.data)

    def record_view(self, invitation: InvitationResponse) -> None:
        # Read-then-write; concurrent views may undercount
        try:
            self.admin_supabase.table(TABLE)\
                .update({"view_count": invitation.view_count + 1})\
                .eq("id", invitation.id)\
                .execute()
        except Exception as e:
            logger.warning(f"Failed to record view for invitation {invitation.id}: {e}")

    def _template_config(self, invitation: InvitationResponse) -> TemplateConfig:
        """Config of the invitation's custom template; defaults when it is unusable.

        Only the invitation owner's templates and public templates are applied.
        """
        template_id = invitation.custom_template_id
        if not template_id:
            return TemplateConfig()
        try:
            result = self.admin_supabase.table("custom_templates")\
                .select("config, user_id, is_public")\
                .eq("id", template_id)\
                .maybe_single()\
                .execute()
        except Exception as e:
            logger.warning(f"Could not load template {template_id}, using defaults: {e}")
            return TemplateConfig()
        row = result.data if result else None
        if not row:
            return TemplateConfig()
        if row.get("user_id") != invitation.user_id and not row.get("is_public"):
            logger.warning(f"Template {template_id} is private to another user, using defaults")
            return TemplateConfig()
        try:
            return TemplateConfig.model_validate(row.get("config"))
        except ValidationError as e:
            logger.warning(f"Template {template_id} has an invalid config, using defaults: {e}")
            return TemplateConfig()

    def render_public_page(self, slug: str) -> str:
        invitation = self.get_public_invitation(slug)
        self.record_view(invitation)
        config = self._template_config(invitation)
        address = ", ".join(p for p in (invitation.address, invitation.city, invitation.state) if p)
        data = {
            "groom_name": invitation.groom_name,
            "bride_name": invitation.bride_name,
            "wedding_date": invitation.wedding_date.strftime("%d.%m.%Y"),
            "wedding_time": invitation.wedding_time.strftime("%H:%M") if invitation.wedding_time else "",
            "venue": invitation.venue,
            "address": address,
            "custom_message": invitation.custom_message or "",
        }
        return render_invitation(
            config,
            data,
            rsvp_url=f"/api/v1/invitations/public/{slug}/rsvp",
            rsvp_deadline=invitation.rsvp_deadline.strftime("%d.%m.%Y") if invitation.rsvp_deadline else None,
        )
