"""Report schemas"""

from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from enum import Enum


class ReportType(str, Enum):
    FEEDBACK = "Feedback"
    REPORT = "Report"


class ReportStatus(str, Enum):
    OPEN = "Open"
    CLOSED = "Closed"


class ReportCreate(BaseModel):
    """Type and description presence is checked by the route"""
    model_config = ConfigDict(populate_by_name=True)

    type: Optional[str] = None
    description: Optional[str] = None
    reported_user_id: Optional[int] = Field(None, alias="reportedUserId")


class ReportStatusUpdate(BaseModel):
    status: ReportStatus
