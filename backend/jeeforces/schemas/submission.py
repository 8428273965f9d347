"""Submission schemas"""

from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import List, Optional


class ContestSubmissionCreate(BaseModel):
    """Answer to one contest problem"""
    model_config = ConfigDict(populate_by_name=True)

    problem_id: int = Field(..., alias="problemId")
    contest_id: int = Field(..., alias="contestId")
    selected_options: List[str] = Field(..., alias="selectedOptions", min_length=1)

    @field_validator('selected_options')
    @classmethod
    def strip_options(cls, v):
        return [option.strip() for option in v]


class FinalSubmissionRequest(BaseModel):
    """Final answers for every attempted problem of one contest"""
    submissions: List[ContestSubmissionCreate] = Field(..., min_length=1)


class PracticeSubmissionRequest(BaseModel):
    """Presence of both fields is checked by the route"""
    model_config = ConfigDict(populate_by_name=True)

    problem_id: Optional[int] = Field(None, alias="problemId")
    selected_option: Optional[str] = Field(None, alias="selectedOption")
