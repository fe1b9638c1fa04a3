"""
API request and response type definitions.
"""

from datetime import datetime
from typing import Any

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    ValidationInfo,
    field_validator,
)


class TicketPayload(BaseModel):
    """Inbound ticket webhook body."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    ticket_id: str | int | None = Field(
        default=None,
        validation_alias=AliasChoices("ticket_id", "ticketId"),
        description="Help-desk ticket identifier",
    )
    company: str = Field(default="", description="Customer company name")
    subject: str = Field(default="", description="Ticket subject")
    description: str = Field(default="", description="Ticket description")
    vip: bool = Field(default=False, description="Requester is a VIP")

    @field_validator("company", "subject", "description", "vip", mode="before")
    @classmethod
    def null_as_default(cls, value: Any, info: ValidationInfo) -> Any:
        """Treat explicit nulls from the help desk as absent fields."""
        if value is None:
            return cls.model_fields[info.field_name].default
        return value

    @property
    def is_complete(self) -> bool:
        """Whether the fields needed to identify the ticket are present."""
        return self.ticket_id not in (None, "") and bool(self.company)


class IntakeResponse(BaseModel):
    """Response body after accepting a ticket webhook."""

    ok: bool = True
    job_id: str
    enqueued: bool = False
    deduped: bool = False


class DrainRequest(BaseModel):
    """Optional body for a POST drain."""

    model_config = ConfigDict(extra="ignore")

    max_jobs: int | str | None = Field(
        default=None,
        validation_alias=AliasChoices("max_jobs", "maxJobs"),
    )


class DrainResponse(BaseModel):
    """Response body after a drain."""

    ok: bool = True
    processed: list[str]


class PurgeResponse(BaseModel):
    """Response body after purging the queue."""

    ok: bool = True
    purged: bool = True


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str
    store: str
    queue_depth: int | None
    timestamp: datetime


class ErrorResponse(BaseModel):
    """Standard error response."""

    error: str
