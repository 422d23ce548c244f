# Pydantic models for incoming API requests
from typing import Optional

from pydantic import BaseModel


class EmbedRequest(BaseModel):
    text: Optional[str] = None
