from pydantic import BaseModel, Field
from typing import Optional, Dict, Any
from datetime import datetime, date, time


class InvitationCreate(BaseModel):
    groom_name: str = Field(..., min_length=1)
    bride_name: str = Field(..., min_length=1)
    wedding_date: date
    wedding_time: Optional[time] = None
    venue: str = Field(..., min_length=1)
    address: str = Field(..., min_length=1)
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None
    custom_message: Optional[str] = None
    template_id: str = "classic"
    custom_template_id: Optional[str] = None
    image_url: Optional[str] = None
    rsvp_deadline: Optional[date] = None
    is_active: bool = True


class InvitationUpdate(BaseModel):
    groom_name: Optional[str] = None
    bride_name: Optional[str] = None
    wedding_date: Optional[date] = None
    wedding_time: Optional[time] = None
    venue: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None
    custom_message: Optional[str] = None
    template_id: Optional[str] = None
    custom_template_id: Optional[str] = None
    image_url: Optional[str] = None
    rsvp_deadline: Optional[date] = None
    is_active: Optional[bool] = None


class InvitationResponse(BaseModel):
    id: str
    user_id: Optional[str] = None
    groom_name: str
    bride_name: str
    wedding_date: date
    wedding_time: Optional[time] = None
    venue: str
    address: str
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None
    custom_message: Optional[str] = None
    template_id: str = "classic"
    custom_template_id: Optional[str] = None
    image_url: Optional[str] = None
    rsvp_deadline: Optional[date] = None
    is_active: bool = True
    slug: str
    view_count: int = 0
    settings: Optional[Dict[str, Any]] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    share_url: Optional[str] = None

    class Config:
        from_attributes = True
