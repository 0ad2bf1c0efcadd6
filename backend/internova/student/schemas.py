"""Student profile response schemas."""

from datetime import datetime

from pydantic import BaseModel
from pydantic.alias_generators import to_camel


class ProfileResponse(BaseModel):
    id: int
    user_id: int
    university_id: str
    department: str
    gpa: float
    skills: str
    resume_url: str
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True, "alias_generator": to_camel, "populate_by_name": True}


def profile_payload(profile) -> dict:
    """JSON-ready camelCase representation of a StudentProfile row."""
    return ProfileResponse.model_validate(profile).model_dump(by_alias=True, mode="json")
