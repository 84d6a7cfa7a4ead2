"""Device data model.

Pure data structure for a single catalog entry.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

# Series tag of the flagship line
PREMIUM_SERIES = "S"


def _split_csv(value: Any) -> tuple[str, ...]:
    """Accept a list or a comma-separated string and return stripped items."""
    if value is None:
        return ()
    if isinstance(value, str):
        items = value.split(",")
    else:
        items = value
    return tuple(str(item).strip() for item in items if str(item).strip())


@dataclass(frozen=True)
class Device:
    """An immutable phone in the catalog."""
    id: int
    model: str
    series: str
    year: int
    display_size: str
    display_type: str
    resolution: str
    processor: str
    ram: str
    storage_options: tuple[str, ...]
    main_camera: str
    front_camera: str
    battery: str
    price: int
    features: str = ""
    image_url: str = ""
    brand: str = "Samsung"
    is_active: bool = True

    def __post_init__(self) -> None:
        if self.price < 0:
            raise ValueError(f"Device {self.model!r} has a negative price: {self.price}")
        # Normalise lists passed in by callers so the instance stays hashable
        object.__setattr__(self, "storage_options", _split_csv(self.storage_options))
        if not self.storage_options:
            raise ValueError(f"Device {self.model!r} has no storage options")

    @property
    def feature_tags(self) -> list[str]:
        """Capability tags from the comma-separated features text."""
        return list(_split_csv(self.features))

    @property
    def is_premium_tier(self) -> bool:
        return self.series == PREMIUM_SERIES

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "model": self.model,
            "brand": self.brand,
            "series": self.series,
            "year": self.year,
            "displaySize": self.display_size,
            "displayType": self.display_type,
            "resolution": self.resolution,
            "processor": self.processor,
            "ram": self.ram,
            "storageOptions": ", ".join(self.storage_options),
            "mainCamera": self.main_camera,
            "frontCamera": self.front_camera,
            "battery": self.battery,
            "price": self.price,
            "imageUrl": self.image_url,
            "isActive": self.is_active,
            "features": self.features,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Device":
        """Create from dictionary (snake_case or camelCase keys)."""
        def pick(snake: str, camel: str, default: Any = "") -> Any:
            if snake in data:
                return data[snake]
            return data.get(camel, default)

        return cls(
            id=int(data["id"]),
            model=data.get("model", "Unknown"),
            brand=data.get("brand", "Samsung"),
            series=data.get("series", ""),
            year=int(data.get("year", 0)),
            display_size=pick("display_size", "displaySize"),
            display_type=pick("display_type", "displayType"),
            resolution=data.get("resolution", ""),
            processor=data.get("processor", ""),
            ram=data.get("ram", ""),
            storage_options=_split_csv(pick("storage_options", "storageOptions", ())),
            main_camera=pick("main_camera", "mainCamera"),
            front_camera=pick("front_camera", "frontCamera"),
            battery=data.get("battery", ""),
            price=int(data.get("price", 0)),
            features=data.get("features", ""),
            image_url=pick("image_url", "imageUrl"),
            is_active=bool(pick("is_active", "isActive", True)),
        )
