from pydantic import BaseModel
from typing import Any

class HealthResponse(BaseModel):
    status: str
    api_key_configured: bool

class ErrorResponse(BaseModel):
    error: Any
