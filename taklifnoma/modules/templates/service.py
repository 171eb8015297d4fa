from supabase import Client
from taklifnoma.modules.templates.schemas import (
    TemplateResponse, TemplateUpdate, SaveResult, SyncResult
)
from taklifnoma.modules.templates.editor import TemplateEditor
from taklifnoma.modules.templates.local_store import LocalTemplateStore, is_local_id
from typing import List, Optional, Dict, Any
from fastapi import HTTPException
import logging

logger = logging.getLogger(__name__)

TABLE = "custom_templates"

# 42P01: Postgres undefined_table. PGRST205: table not in PostgREST schema cache.
# PGRST116 is what older PostgREST versions returned for the same situation on .single().
MISSING_TABLE_CODES = {"42P01", "PGRST205", "PGRST116"}
MISSING_TABLE_MARKERS = ("does not exist", "could not find the table")

# Fields that only make sense for the local copy
LOCAL_ONLY_FIELDS = ("id", "created_at", "is_local", "pending_sync", "fallback_reason")


def is_missing_table_error(error: Exception) -> bool:
    code = getattr(error, "code", None)
    if code in MISSING_TABLE_CODES:
        return True
    message = (getattr(error, "message", None) or str(error)).lower()
    return any(marker in message for marker in MISSING_TABLE_MARKERS)


class CustomTemplateService:
    def __init__(self, supabase: Client, local_store: LocalTemplateStore):
        self.supabase = supabase
        self.local_store = local_store

    def save_template(self, editor: TemplateEditor, user_id: Optional[str]) -> SaveResult:
        """Insert the editor's template into Supabase, falling back to the local store.

        A missing table and any other remote failure both end in a local copy
        flagged ``pending_sync``; sync_local_templates uploads it later.
        """
        if not user_id:
            raise HTTPException(status_code=401, detail="You must be signed in to save a template")
        try:
            editor.validate_for_save()
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))

        record = editor.build_record(user_id)
        logger.info(f"Saving template '{record['name']}' for user {user_id}")

        try:
            result = self.supabase.table(TABLE).insert(record).execute()
            if not result.data:
                raise RuntimeError("Insert returned no rows")
        except Exception as e:
            if is_missing_table_error(e):
                logger.warning(f"{TABLE} table not found ({e}), saving template locally")
                reason = "table_missing"
                message = "Template saved locally; it will be uploaded once the database is available"
            else:
                logger.error(f"Supabase template save failed: {e}")
                reason = "remote_error"
                message = "Template saved locally"
            stored = self.local_store.save({**record, "pending_sync": True, "fallback_reason": reason})
            return SaveResult(
                template=TemplateResponse(**stored),
                storage="local",
                message=message,
                fallback_reason=reason,
            )

        logger.info(f"Template saved to Supabase: {result.data[0].get('id')}")
        return SaveResult(
            template=TemplateResponse(**result.data[0]),
            storage="remote",
            message="Template saved",
        )

    def sync_local_templates(self, user_id: str) -> SyncResult:
        """Upload the user's pending local templates and drop each local copy that made it."""
        synced = []
        failed = 0
        for record in self.local_store.list(user_id):
            if not record.get("pending_sync"):
                continue
            payload = {k: v for k, v in record.items() if k not in LOCAL_ONLY_FIELDS}
            try:
                result = self.supabase.table(TABLE).insert(payload).execute()
                if not result.data:
                    raise RuntimeError("Insert returned no rows")
            except Exception as e:
                logger.warning(f"Local template {record['id']} not synced: {e}")
                failed += 1
                continue
            self.local_store.delete(record["id"])
            synced.append(result.data[0]["id"])
            logger.info(f"Local template {record['id']} synced as {result.data[0]['id']}")

        remaining = len([r for r in self.local_store.list(user_id) if r.get("pending_sync")])
        return SyncResult(synced=synced, failed=failed, remaining=remaining)

    def list_templates(self, user_id: str, include_local: bool = True) -> List[TemplateResponse]:
        remote: List[Dict[str, Any]] = []
        try:
            result = self.supabase.table(TABLE)\
                .select("*")\
                .eq("user_id", user_id)\
                .order("created_at", desc=True)\
                .execute()
            remote = result.data or []
        except Exception as e:
            if not is_missing_table_error(e):
                raise HTTPException(status_code=500, detail=str(e))
            logger.warning(f"{TABLE} table not found, listing local templates only")

        items = [TemplateResponse(**t) for t in remote]
        if include_local:
            items.extend(TemplateResponse(**t) for t in self.local_store.list(user_id))
        return items

    def list_public_templates(self, limit: int = 20, offset: int = 0) -> List[TemplateResponse]:
        try:
            result = self.supabase.table(TABLE)\
                .select("*")\
                .eq("is_public", True)\
                .eq("is_active", True)\
                .order("usage_count", desc=True)\
                .limit(limit)\
                .offset(offset)\
                .execute()
            return [TemplateResponse(**t) for t in result.data or []]
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def _get_local(self, template_id: str, user_id: str) -> Dict[str, Any]:
        record = self.local_store.get(template_id)
        if not record or record.get("user_id") != user_id:
            raise HTTPException(status_code=404, detail="Template not found")
        return record

    def _get_remote(self, template_id: str) -> Dict[str, Any]:
        try:
            result = self.supabase.table(TABLE).select("*").eq("id", template_id).maybe_single().execute()
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))
        if not result or not result.data:
            raise HTTPException(status_code=404, detail="Template not found")
        return result.data

    def get_template(self, template_id: str, user_id: str) -> TemplateResponse:
        """Own templates (remote or local) and public templates are readable."""
        if is_local_id(template_id):
            return TemplateResponse(**self._get_local(template_id, user_id))
        row = self._get_remote(template_id)
        if row.get("user_id") != user_id and not row.get("is_public"):
            raise HTTPException(status_code=404, detail="Template not found")
        return TemplateResponse(**row)

    def update_template(self, template_id: str, template_data: TemplateUpdate, user_id: str) -> TemplateResponse:
        update_data: Dict[str, Any] = {}
        if template_data.name is not None:
            if not template_data.name.strip():
                raise HTTPException(status_code=400, detail="Template name is required")
            update_data["name"] = template_data.name.strip()
        if template_data.description is not None:
            update_data["description"] = template_data.description
        if template_data.is_public is not None:
            update_data["is_public"] = template_data.is_public
        if template_data.config is not None:
            config = template_data.config.to_dict()
            update_data.update({
                "config": config,
                "colors": config["colors"],
                "fonts": config["fonts"],
                "layout": config["layout"],
            })
        if not update_data:
            raise HTTPException(status_code=400, detail="Nothing to update")

        if is_local_id(template_id):
            record = self._get_local(template_id, user_id)
            record.update(update_data)
            return TemplateResponse(**self.local_store.save(record))

        try:
            result = self.supabase.table(TABLE)\
                .update(update_data)\
                .eq("id", template_id)\
                .eq("user_id", user_id)\
                .execute()
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))
        if not result.data:
            raise HTTPException(status_code=404, detail="Template not found")
        return TemplateResponse(**result.data[0])

    def delete_template(self, template_id: str, user_id: str) -> None:
        if is_local_id(template_id):
            self._get_local(template_id, user_id)
            self.local_store.delete(template_id)
            return
        try:
            result = self.supabase.table(TABLE)\
                .delete()\
                .eq("id", template_id)\
                .eq("user_id", user_id)\
                .execute()
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))
        if not result.data:
            raise HTTPException(status_code=404, detail="Template not found")
