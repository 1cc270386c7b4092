from pydantic import BaseModel, ConfigDict
from typing import Optional


class DiveLogRecord(BaseModel):
    """
    A dive-log row as stored by the journal.

    Numeric columns are nullable; the journal form stores blank inputs as
    null or 0. Boolean safety columns default to False.
    """

    model_config = ConfigDict(extra="ignore")

    date: Optional[str] = None
    discipline: str
    location: Optional[str] = None

    # Depth measurements (m)
    target_depth: Optional[float] = None
    reached_depth: Optional[float] = None
    mouthfill_depth: Optional[float] = None
    issue_depth: Optional[float] = None

    # Time measurements (s)
    total_dive_time: Optional[float] = None

    # Safety and issues
    squeeze: bool = False
    blackout: bool = False
    lmc: bool = False
    issue_comment: Optional[str] = None
    notes: Optional[str] = None
