from pydantic import BaseModel, Field
from datetime import datetime


class ErrorResponse(BaseModel):
    """Client error body"""
    error: str


class HealthCheckResponse(BaseModel):
    """Health check response"""
    status: str
    version: str
    timestamp: datetime = Field(default_factory=datetime.now)
