"""Song URL Schemas — shape of the upstream /song/url/v1 response.

Invariants:
    - Strict types: a string where an integer is expected is a decode failure
    - Every track field is optional; null is accepted anywhere
    - Unknown fields are allowed (extra="allow") and never dropped
    - uf / freeTrialInfo are opaque JSON values, never interpreted

Design Decisions:
    - Used for validation only: the relay returns the decoded dict, not a re-dump,
      so field order and opaque payloads survive byte-for-byte in meaning
    - Missing `code` defaults to 0, which the relay then reports as rejected
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class TrackEntry(BaseModel):
    """One resolved track. Passed through verbatim."""
    model_config = ConfigDict(extra="allow", strict=True, populate_by_name=True)

    id: int | None = None
    url: str | None = None
    br: int | None = None
    size: int | None = None
    md5: str | None = None
    code: int | None = None
    expi: int | None = None
    type: str | None = None
    gain: float | None = None
    peak: float | None = None
    fee: int | None = None
    uf: Any = None
    payed: int | None = None
    flag: int | None = None
    can_extend: bool | None = Field(None, alias="canExtend")
    free_trial_info: Any = Field(None, alias="freeTrialInfo")
    level: str | None = None


class SongURLResponse(BaseModel):
    """Top-level upstream envelope."""
    model_config = ConfigDict(extra="allow", strict=True)

    code: int = 0
    data: list[TrackEntry] | None = None
