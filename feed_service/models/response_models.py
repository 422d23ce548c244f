# Pydantic models for outgoing API responses
from typing import List

from pydantic import BaseModel


class EmbedResponse(BaseModel):
    embedding: List[float]


class HealthResponse(BaseModel):
    status: str = "healthy"
