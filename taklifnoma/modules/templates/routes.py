from fastapi import APIRouter, Depends, HTTPException
from taklifnoma.config import settings
from taklifnoma.database.supabase_client import get_supabase
from taklifnoma.modules.templates.schemas import (
    EditorState, EditorChangeRequest, ApplyPresetRequest, PreviewResponse,
    TemplateOptionsResponse, TemplateSaveRequest, TemplateUpdate, TemplateResponse,
    SaveResult, SyncResult
)
from taklifnoma.modules.templates.editor import TemplateEditor
from taklifnoma.modules.templates.local_store import LocalTemplateStore
from taklifnoma.modules.templates.presets import COLOR_PRESETS, FONT_OPTIONS, LAYOUT_STYLES, ANIMATION_TYPES
from taklifnoma.modules.templates.service import CustomTemplateService
from taklifnoma.core.dependencies import get_current_user_id, get_user_supabase
from supabase import Client
from typing import List, Dict

router = APIRouter(prefix="/templates", tags=["templates"])


def get_local_store() -> LocalTemplateStore:
    return LocalTemplateStore(settings.local_store_dir)


def get_template_service(
    supabase: Client = Depends(get_user_supabase),
    local_store: LocalTemplateStore = Depends(get_local_store),
) -> CustomTemplateService:
    return CustomTemplateService(supabase, local_store)


def get_public_template_service(
    supabase: Client = Depends(get_supabase),
    local_store: LocalTemplateStore = Depends(get_local_store),
) -> CustomTemplateService:
    return CustomTemplateService(supabase, local_store)


def _editor_from(state: EditorState) -> TemplateEditor:
    return TemplateEditor(config=state.config, data=state.data, device=state.device)


@router.get("/options", response_model=TemplateOptionsResponse)
async def get_options():
    """Color presets, fonts, layout styles and animation types for the builder."""
    return TemplateOptionsResponse(
        color_presets=COLOR_PRESETS,
        fonts=FONT_OPTIONS,
        layout_styles=LAYOUT_STYLES,
        animation_types=ANIMATION_TYPES,
    )


@router.get("/defaults", response_model=EditorState)
async def get_defaults():
    return EditorState()


@router.post("/preview", response_model=PreviewResponse)
async def preview(state: EditorState):
    """Styles and HTML for the live preview of an editor state."""
    editor = _editor_from(state)
    return PreviewResponse(styles=editor.preview_styles(), html=editor.render())


@router.post("/editor/change", response_model=EditorState)
async def apply_change(request: EditorChangeRequest):
    """Change a single setting and return the resulting editor state."""
    editor = _editor_from(request)
    try:
        editor.apply_change(request.section, request.key, request.value)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return EditorState(config=editor.config, data=editor.data, device=editor.device)


@router.post("/editor/preset", response_model=EditorState)
async def apply_preset(request: ApplyPresetRequest):
    editor = _editor_from(request)
    try:
        editor.apply_color_preset(request.preset)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return EditorState(config=editor.config, data=editor.data, device=editor.device)


@router.post("/editor/reset", response_model=EditorState)
async def reset_config(state: EditorState):
    editor = _editor_from(state)
    editor.reset_to_defaults()
    return EditorState(config=editor.config, data=editor.data, device=editor.device)


@router.get("/public", response_model=List[TemplateResponse])
async def list_public_templates(
    limit: int = 20,
    offset: int = 0,
    service: CustomTemplateService = Depends(get_public_template_service),
):
    return service.list_public_templates(limit=limit, offset=offset)


@router.post("", response_model=SaveResult, status_code=201)
async def save_template(
    request: TemplateSaveRequest,
    user_data: Dict = Depends(get_current_user_id),
    service: CustomTemplateService = Depends(get_template_service),
):
    """Save the template to Supabase, or locally when Supabase refuses the write."""
    editor = TemplateEditor(config=request.config, data=request.data)
    return service.save_template(editor, user_data["id"])


@router.get("", response_model=List[TemplateResponse])
async def list_templates(
    include_local: bool = True,
    user_data: Dict = Depends(get_current_user_id),
    service: CustomTemplateService = Depends(get_template_service),
):
    return service.list_templates(user_data["id"], include_local=include_local)


@router.post("/sync", response_model=SyncResult)
async def sync_local_templates(
    user_data: Dict = Depends(get_current_user_id),
    service: CustomTemplateService = Depends(get_template_service),
):
    """Upload templates that were saved locally while Supabase was unavailable."""
    return service.sync_local_templates(user_data["id"])


@router.get("/{template_id}", response_model=TemplateResponse)
async def get_template(
    template_id: str,
    user_data: Dict = Depends(get_current_user_id),
    service: CustomTemplateService = Depends(get_template_service),
):
    return service.get_template(template_id, user_data["id"])


@router.put("/{template_id}", response_model=TemplateResponse)
async def update_template(
    template_id: str,
    template_data: TemplateUpdate,
    user_data: Dict = Depends(get_current_user_id),
    service: CustomTemplateService = Depends(get_template_service),
):
    return service.update_template(template_id, template_data, user_data["id"])


@router.delete("/{template_id}", status_code=204)
async def delete_template(
    template_id: str,
    user_data: Dict = Depends(get_current_user_id),
    service: CustomTemplateService = Depends(get_template_service),
):
    service.delete_template(template_id, user_data["id"])
    return None
