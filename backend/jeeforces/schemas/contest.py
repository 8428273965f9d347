"""Contest schemas"""

from pydantic import BaseModel, ConfigDict, Field, model_validator
from typing import List
from datetime import datetime

from jeeforces.core.timeutil import naive_utc


class ContestCreate(BaseModel):
    """Create contest schema"""
    model_config = ConfigDict(populate_by_name=True)

    title: str = Field(..., min_length=5, max_length=200)
    description: str = Field(..., max_length=500)
    start_time: datetime = Field(..., alias="startTime")
    end_time: datetime = Field(..., alias="endTime")
    problems: List[int] = Field(default_factory=list)

    @model_validator(mode='after')
    def ends_after_start(self):
        # Offsets are dropped after conversion so aware and naive inputs compare.
        self.start_time = naive_utc(self.start_time)
        self.end_time = naive_utc(self.end_time)
        if self.end_time <= self.start_time:
            raise ValueError('endTime must be after startTime')
        if len(set(self.problems)) != len(self.problems):
            raise ValueError('Duplicate problem ids')
        return self


class StandingEntry(BaseModel):
    """One row of a contest standings table"""
    model_config = ConfigDict(populate_by_name=True)

    rank: int
    user_id: int = Field(..., alias="userId")
    username: str
    total_score: int = Field(..., alias="totalScore")
    last_submission: datetime = Field(..., alias="lastSubmission")
