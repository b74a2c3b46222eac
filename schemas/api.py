"""
Pydantic schemas for API responses
"""

from pydantic import BaseModel, Field, validator
from typing import Optional, Dict, Any
from datetime import datetime


# ============================================================================
# Health Check Schemas
# ============================================================================

class HealthCheckResponse(BaseModel):
    """Health check response model"""
    database_connected: bool
    status: str = Field(..., description="Overall system status: healthy, unhealthy")
    timestamp: datetime = Field(default_factory=datetime.utcnow)
    supported_metals: list = Field(default_factory=list)
    
    @validator("status", pre=True, always=True)
    def determine_status(cls, v, values):
        """Unhealthy whenever the database is unreachable"""
        if not values.get("database_connected", False):
            return "unhealthy"
        return "healthy"
    
    class Config:
        json_schema_extra = {
            "example": {
                "status": "healthy",
                "timestamp": "2024-01-15T10:30:00Z",
                "database_connected": True,
                "supported_metals": ["aluminium", "copper", "steel"]
            }
        }


# ============================================================================
# Error Schemas
# ============================================================================

class ErrorResponse(BaseModel):
    """Body returned for every engine error"""
    error: str
    code: str
    context: Dict[str, Any] = Field(default_factory=dict)
    request_id: Optional[str] = None
    
    class Config:
        json_schema_extra = {
            "example": {
                "error": "Assessment not found",
                "code": "ASSESSMENT_NOT_FOUND",
                "context": {"assessment_id": 42},
                "request_id": "3f0c8f9e-3a5e-4a53-9d0b-2d5b1e4c9a10"
            }
        }
