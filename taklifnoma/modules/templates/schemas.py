import json
from pydantic import BaseModel, Field, field_validator, model_validator
from typing import Optional, Dict, Any, List, Literal
from datetime import datetime

LayoutStyle = Literal["classic", "modern", "elegant", "rustic", "luxury"]
AnimationType = Literal["fade", "slide", "scale", "bounce"]
PreviewDevice = Literal["desktop", "tablet", "mobile"]


class ColorScheme(BaseModel):
    primary: str = Field("hsl(220, 91%, 56%)", min_length=1)
    secondary: str = Field("hsl(220, 14%, 96%)", min_length=1)
    accent: str = Field("hsl(220, 91%, 66%)", min_length=1)
    background: str = Field("hsl(0, 0%, 100%)", min_length=1)
    text: str = Field("hsl(224, 71%, 4%)", min_length=1)


class FontScheme(BaseModel):
    heading: str = Field("Playfair Display", min_length=1)
    body: str = Field("Inter", min_length=1)
    accent: str = Field("Dancing Script", min_length=1)


class LayoutSettings(BaseModel):
    style: LayoutStyle = "elegant"
    spacing: int = Field(24, ge=10, le=50)
    border_radius: int = Field(16, ge=0, le=30, alias="borderRadius")
    shadow_intensity: int = Field(12, ge=0, le=20, alias="shadowIntensity")
    padding: int = Field(32, ge=16, le=60)

    class Config:
        populate_by_name = True


class AnimationSettings(BaseModel):
    enabled: bool = True
    type: AnimationType = "fade"
    duration: float = Field(0.5, ge=0.1, le=2.0)


class TemplateConfig(BaseModel):
    """Style configuration edited in the template builder.

    Serialised with ``by_alias=True`` so stored rows keep the camelCase keys
    the web client reads (``borderRadius``, ``shadowIntensity``).
    """
    colors: ColorScheme = Field(default_factory=ColorScheme)
    fonts: FontScheme = Field(default_factory=FontScheme)
    layout: LayoutSettings = Field(default_factory=LayoutSettings)
    animations: AnimationSettings = Field(default_factory=AnimationSettings)

    @model_validator(mode="before")
    @classmethod
    def _decode(cls, value):
        # Older web clients stored the config JSON-encoded as a string
        if isinstance(value, str):
            return json.loads(value) if value else {}
        return {} if value is None else value

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)


class InvitationPreviewData(BaseModel):
    template_name: str = Field("Yangi Shablon", alias="templateName")
    groom_name: str = Field("Jahongir", alias="groomName")
    bride_name: str = Field("Sarvinoz", alias="brideName")
    wedding_date: str = Field("15 Iyun, 2024", alias="weddingDate")
    wedding_time: str = Field("16:00", alias="weddingTime")
    venue: str = "Atirgul Bog'i"
    address: str = "Toshkent sh., Yunusobod t., Bog' ko'chasi 123"
    custom_message: str = Field(
        "Bizning sevgi va baxt to'la kunimizni birga nishonlash uchun sizni taklif qilamiz.",
        alias="customMessage",
    )

    class Config:
        populate_by_name = True


class PreviewStyles(BaseModel):
    container: Dict[str, str]
    heading: Dict[str, str]
    accent: Dict[str, str]
    layout_class: str
    device_class: str
    text_sizes: Dict[str, str]


# Editor requests


class EditorState(BaseModel):
    config: TemplateConfig = Field(default_factory=TemplateConfig)
    data: InvitationPreviewData = Field(default_factory=InvitationPreviewData)
    device: PreviewDevice = "desktop"


class EditorChangeRequest(EditorState):
    section: Literal["colors", "fonts", "layout", "animations", "data"]
    key: str
    value: Any


class ApplyPresetRequest(EditorState):
    preset: str


class PreviewResponse(BaseModel):
    styles: PreviewStyles
    html: str


class TemplateOptionsResponse(BaseModel):
    color_presets: List[Dict[str, Any]]
    fonts: List[Dict[str, str]]
    layout_styles: List[Dict[str, str]]
    animation_types: List[Dict[str, str]]


# Persistence


class TemplateSaveRequest(BaseModel):
    config: TemplateConfig = Field(default_factory=TemplateConfig)
    data: InvitationPreviewData = Field(default_factory=InvitationPreviewData)


class TemplateUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    config: Optional[TemplateConfig] = None
    is_public: Optional[bool] = None


class TemplateResponse(BaseModel):
    id: str
    user_id: Optional[str] = None
    name: str
    description: Optional[str] = None
    category: Optional[str] = "custom"
    config: TemplateConfig = Field(default_factory=TemplateConfig)
    is_public: bool = False
    is_featured: bool = False
    usage_count: int = 0
    tags: List[str] = []
    metadata: Dict[str, Any] = {}
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    is_local: bool = False
    pending_sync: bool = False

    @field_validator("tags", mode="before")
    @classmethod
    def _none_tags(cls, value):
        return value or []

    @field_validator("metadata", mode="before")
    @classmethod
    def _none_metadata(cls, value):
        return value or {}

    class Config:
        from_attributes = True


class SaveResult(BaseModel):
    template: TemplateResponse
    storage: Literal["remote", "local"]
    message: str
    fallback_reason: Optional[Literal["table_missing", "remote_error"]] = None


class SyncResult(BaseModel):
    synced: List[str]
    failed: int
    remaining: int
