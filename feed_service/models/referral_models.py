# Models for products shared between users
from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, field_validator

from feed_service.models.product_models import Product

MAX_MESSAGE_LENGTH = 500


class ReferralUser(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    name: Optional[str] = None
    email: Optional[str] = None
    avatar_url: Optional[str] = None


class SocialReferral(BaseModel):
    """
    A product recommendation sent from one user to another.

    sender and product are joined in by the referral query; product may be
    null when the referenced product has been removed.
    """
    model_config = ConfigDict(extra="ignore")

    id: str
    sender_id: str
    receiver_id: str
    product_id: str
    message: Optional[str] = None
    created_at: Optional[datetime] = None
    sender: Optional[ReferralUser] = None
    product: Optional[Product] = None

    @field_validator("id", "sender_id", "receiver_id", "product_id", mode="before")
    @classmethod
    def _coerce_ids(cls, value: Any) -> Any:
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator("message", mode="before")
    @classmethod
    def _bound_message(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value[:MAX_MESSAGE_LENGTH]
        return value

    @property
    def sender_display_name(self) -> str:
        if self.sender:
            return self.sender.name or self.sender.email or self.sender_id
        return self.sender_id
