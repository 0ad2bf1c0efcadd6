"""Authentication request/response schemas."""

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel

_CAMEL = {"alias_generator": to_camel, "populate_by_name": True}


class RegisterRequest(BaseModel):
    full_name: str = Field(..., max_length=200)
    email: str = Field(..., max_length=320)
    password: str = Field(..., max_length=255)
    role: str = Field(..., max_length=20)

    model_config = _CAMEL


class LoginRequest(BaseModel):
    email: str
    password: str

    model_config = _CAMEL


class AuthResponse(BaseModel):
    token: str
    user_id: int
    email: str
    role: str

    model_config = _CAMEL
