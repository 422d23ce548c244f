# Models for user taste preferences
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

DEFAULT_HISTORY_LIMIT = 10


class PriceRange(BaseModel):
    min: Optional[float] = Field(default=None, ge=0)
    max: Optional[float] = Field(default=None, ge=0)

    @field_validator("min", "max", mode="before")
    @classmethod
    def _drop_invalid_bound(cls, value: Any) -> Any:
        # an unusable bound is treated as unset
        if value is None or isinstance(value, bool):
            return None
        try:
            bound = float(value)
        except (TypeError, ValueError):
            return None
        return bound if bound >= 0 else None

    @property
    def has_bounds(self) -> bool:
        return self.min is not None or self.max is not None


class PreferenceProfile(BaseModel):
    """
    Preference profile stored for a single user.

    search_history is ordered oldest to newest.
    """
    model_config = ConfigDict(extra="ignore")

    theme: Optional[str] = None  # cosmetic, stored as given
    notifications: Optional[bool] = None
    favorite_brands: List[str] = Field(default_factory=list)
    price_range: Optional[PriceRange] = None
    search_history: List[str] = Field(default_factory=list)

    @field_validator("favorite_brands", mode="before")
    @classmethod
    def _unique_brands(cls, value: Any) -> Any:
        if not value:
            return []
        if not isinstance(value, list):
            return value
        seen = set()
        brands = []
        for brand in value:
            if not isinstance(brand, str):
                continue
            name = brand.strip()
            if name and name not in seen:
                seen.add(name)
                brands.append(name)
        return brands

    @field_validator("search_history", mode="before")
    @classmethod
    def _default_history(cls, value: Any) -> Any:
        if not value:
            return []
        if isinstance(value, list):
            return [entry for entry in value if isinstance(entry, str)]
        return value

    @field_validator("theme", "notifications", mode="before")
    @classmethod
    def _drop_invalid_setting(cls, value: Any, info: ValidationInfo) -> Any:
        expected = bool if info.field_name == "notifications" else str
        return value if isinstance(value, expected) else None

    @classmethod
    def empty(cls) -> "PreferenceProfile":
        return cls()

    @property
    def is_empty(self) -> bool:
        has_price = self.price_range is not None and self.price_range.has_bounds
        return not self.favorite_brands and not has_price and not self.search_history

    def record_search(self, query: str, limit: int = DEFAULT_HISTORY_LIMIT) -> "PreferenceProfile":
        """Return a copy with query appended and history trimmed to the newest entries."""
        history = [*self.search_history, query][-limit:]
        return self.model_copy(update={"search_history": history})
