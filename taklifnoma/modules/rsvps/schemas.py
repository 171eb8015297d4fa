from pydantic import BaseModel, EmailStr, Field
from typing import Optional
from datetime import datetime


class RsvpCreate(BaseModel):
    guest_name: str = Field(..., min_length=1)
    will_attend: bool
    plus_one_attending: Optional[bool] = None
    message: Optional[str] = None
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    dietary_requirements: Optional[str] = None
    song_request: Optional[str] = None


class RsvpSubmitted(BaseModel):
    message: str
    invitation_id: str


class RsvpResponse(BaseModel):
    id: str
    invitation_id: str
    guest_name: str
    will_attend: bool
    plus_one_attending: Optional[bool] = None
    message: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    dietary_requirements: Optional[str] = None
    song_request: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class RsvpSummary(BaseModel):
    total: int
    attending: int
    declined: int
    plus_ones: int
    expected_guests: int
