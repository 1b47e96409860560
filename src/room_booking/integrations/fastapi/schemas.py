from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from ...domain.constants import Role

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+$"


# --- Auth --------------------------------------------------------------------


class LoginRequest(BaseModel):
    email: str = Field(pattern=EMAIL_PATTERN)
    password: str = Field(min_length=1)


class RefreshTokenRequest(BaseModel):
    refresh_token: str = Field(min_length=1)


class RegisterRequest(BaseModel):
    email: str = Field(pattern=EMAIL_PATTERN)
    password: str = Field(min_length=6)
    name: str = ""
    phone: str = ""


class UserCreateRequest(RegisterRequest):
    role: Role = Role.USER


class TokenResponse(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str = "Bearer"


# --- Users -------------------------------------------------------------------


class UserResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    email: str
    name: str
    phone: str
    role: Role


class UserUpdateRequest(BaseModel):
    name: Optional[str] = None
    phone: Optional[str] = None
    password: Optional[str] = Field(default=None, min_length=6)


# --- Rooms -------------------------------------------------------------------


class RoomRequest(BaseModel):
    name: str = Field(min_length=1)
    capacity: int = Field(gt=0)
    location: str = Field(min_length=1)
    description: Optional[str] = None


class RoomResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    capacity: int
    location: str
    description: Optional[str] = None


# --- Reservations --------------------------------------------------------------


class ReservationRequest(BaseModel):
    room_id: int
    start_time: datetime
    end_time: datetime


class ReservationUpdateRequest(BaseModel):
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None


class ReservationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    room_id: int
    user_id: int
    start_time: datetime
    end_time: datetime
