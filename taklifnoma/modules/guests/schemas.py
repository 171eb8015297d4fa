from pydantic import BaseModel, EmailStr, Field
from typing import Optional
from datetime import datetime


class GuestCreate(BaseModel):
    name: str = Field(..., min_length=1)
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    plus_one: bool = False
    group_name: Optional[str] = None
    notes: Optional[str] = None
    is_vip: bool = False


class GuestUpdate(BaseModel):
    name: Optional[str] = None
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    plus_one: Optional[bool] = None
    group_name: Optional[str] = None
    notes: Optional[str] = None
    is_vip: Optional[bool] = None


class GuestResponse(BaseModel):
    id: str
    invitation_id: str
    name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    plus_one: bool = False
    group_name: Optional[str] = None
    notes: Optional[str] = None
    is_vip: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
