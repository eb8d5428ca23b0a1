"""User data model."""

from datetime import datetime
from pydantic import BaseModel, Field


class User(BaseModel):
    """An authenticated journal owner."""

    id: str = Field(..., min_length=1, description="User identifier")
    email: str = Field(..., min_length=3, description="Login email")
    name: str = Field(..., description="Display name")
    created_at: datetime = Field(
        default_factory=datetime.now, description="Registration timestamp"
    )

    model_config = {"frozen": True}
