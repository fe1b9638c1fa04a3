"""
Job-related type definitions for internal use.
"""

import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    PrivateAttr,
    SerializerFunctionWrapHandler,
    ValidatorFunctionWrapHandler,
    model_serializer,
    model_validator,
)

from ticket_relay.constants import JOB_ID_ALIAS, JOB_ID_FIELD, DiscardReason


class Job(BaseModel):
    """
    A unit of queued work.

    Only `job_id` is interpreted by the queue, lease and ledger. Every other
    attribute supplied by the producer is carried through unexamined.

    Producers may name the identity `job_id` or `jobId`; the job is dumped
    back under whichever key it arrived with, so a decoded entry has the
    same shape as the one that was enqueued.
    """

    model_config = ConfigDict(extra="allow", frozen=True)

    job_id: str = Field(
        ...,
        min_length=1,
        validation_alias=AliasChoices(JOB_ID_FIELD, JOB_ID_ALIAS),
    )

    _id_key: str = PrivateAttr(default=JOB_ID_FIELD)

    @model_validator(mode="wrap")
    @classmethod
    def remember_id_key(cls, data: Any, handler: ValidatorFunctionWrapHandler) -> "Job":
        job = handler(data)
        if (
            isinstance(data, Mapping)
            and JOB_ID_FIELD not in data
            and JOB_ID_ALIAS in data
        ):
            job._id_key = JOB_ID_ALIAS
        return job

    @model_serializer(mode="wrap")
    def restore_id_key(self, handler: SerializerFunctionWrapHandler) -> dict[str, Any]:
        data = handler(self)
        if self._id_key != JOB_ID_FIELD and JOB_ID_FIELD in data:
            data[self._id_key] = data.pop(JOB_ID_FIELD)
        return data

    @property
    def id_key(self) -> str:
        """The key the producer used for the identity."""
        return self._id_key

    @property
    def attributes(self) -> dict[str, Any]:
        """Producer-supplied attributes other than the identity."""
        return dict(self.model_extra or {})

    def to_entry(self) -> str:
        """Serialize to the canonical queue entry string."""
        return json.dumps(
            self.model_dump(mode="json"),
            sort_keys=True,
            separators=(",", ":"),
        )


@dataclass(frozen=True)
class ParsedEntry:
    """A queue entry that decoded into a valid job."""

    job: Job


@dataclass(frozen=True)
class DiscardedEntry:
    """A queue entry that was rejected, with the reason and a short preview."""

    reason: DiscardReason
    preview: str


ParseOutcome = ParsedEntry | DiscardedEntry


@dataclass
class DrainResult:
    """
    Outcome of one bounded drain.

    `processed` lists the job identities that completed successfully.
    Contended and failed identities are kept for diagnostics only.
    """

    processed: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)
    empty: bool = False

    @property
    def attempted(self) -> int:
        """Number of jobs dequeued during the drain."""
        return len(self.processed) + len(self.skipped) + len(self.failed)
