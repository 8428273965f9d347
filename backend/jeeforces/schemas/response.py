"""Generic API response schemas"""

from pydantic import BaseModel
from typing import Any, Dict


class MessageResponse(BaseModel):
    """Plain acknowledgement"""
    message: str


class HealthResponse(BaseModel):
    """Health check response"""
    status: str
    version: str
    timestamp: str
    readiness: Dict[str, Any]
