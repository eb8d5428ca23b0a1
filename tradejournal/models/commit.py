"""CommitResult data model."""

from typing import Optional
from pydantic import BaseModel, Field

from tradejournal.models.journal import Journal


class CommitResult(BaseModel):
    """Outcome of writing a journal snapshot to the store."""

    ok: bool = Field(..., description="Whether the write succeeded")
    journal: Optional[Journal] = Field(default=None, description="Stored snapshot on success")
    error: Optional[str] = Field(default=None, description="Failure message")

    model_config = {"frozen": True}
