"""Catalog Provider - Read-only snapshots of the devices available for recommendation.

Interface Contract:
- list_devices() -> list[Device]
- InMemoryCatalog never mutates after construction; it is safe to share
  across concurrent requests
- Loading raises CatalogError on unreadable or invalid input
"""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Iterable

from phone_advisor.models import Device

logger = logging.getLogger(__name__)


class CatalogError(Exception):
    """Raised when a catalog cannot be loaded."""
    pass


class CatalogProvider(ABC):
    """Source of candidate devices."""

    @abstractmethod
    def list_devices(self) -> list[Device]:
        """Return every active device in the catalog."""
        pass


SAMPLE_DEVICES: list[dict] = [
    {
        "id": 1,
        "model": "Galaxy S24",
        "series": "S",
        "year": 2024,
        "displaySize": "6.2 inches",
        "displayType": "Dynamic AMOLED 2X",
        "resolution": "2340 x 1080",
        "processor": "Snapdragon 8 Gen 3",
        "ram": "8GB",
        "storageOptions": "128GB, 256GB",
        "mainCamera": "50MP Wide, 12MP Ultra-wide, 10MP Telephoto",
        "frontCamera": "12MP",
        "battery": "4000 mAh",
        "price": 799,
        "features": "IP68, Wireless Charging, Galaxy AI, Ultra HDR",
    },
    {
        "id": 2,
        "model": "Galaxy S24+",
        "series": "S",
        "year": 2024,
        "displaySize": "6.7 inches",
        "displayType": "Dynamic AMOLED 2X",
        "resolution": "3120 x 1440",
        "processor": "Snapdragon 8 Gen 3",
        "ram": "12GB",
        "storageOptions": "256GB, 512GB",
        "mainCamera": "50MP Wide, 12MP Ultra-wide, 10MP Telephoto",
        "frontCamera": "12MP",
        "battery": "4900 mAh",
        "price": 999,
        "features": "IP68, Wireless Charging, Galaxy AI, Ultra HDR",
    },
    {
        "id": 3,
        "model": "Galaxy S24 Ultra",
        "series": "S",
        "year": 2024,
        "displaySize": "6.8 inches",
        "displayType": "Dynamic AMOLED 2X",
        "resolution": "3120 x 1440",
        "processor": "Snapdragon 8 Gen 3",
        "ram": "12GB",
        "storageOptions": "256GB, 512GB, 1TB",
        "mainCamera": "200MP Wide, 12MP Ultra-wide, 50MP Telephoto, 10MP Telephoto",
        "frontCamera": "12MP",
        "battery": "5000 mAh",
        "price": 1299,
        "features": "IP68, S Pen, Wireless Charging, Galaxy AI, Titanium Frame",
    },
    {
        "id": 4,
        "model": "Galaxy A54",
        "series": "A",
        "year": 2023,
        "displaySize": "6.4 inches",
        "displayType": "Super AMOLED",
        "resolution": "2340 x 1080",
        "processor": "Exynos 1380",
        "ram": "6GB, 8GB",
        "storageOptions": "128GB, 256GB",
        "mainCamera": "50MP Wide, 12MP Ultra-wide, 5MP Macro",
        "frontCamera": "32MP",
        "battery": "5000 mAh",
        "price": 449,
        "features": "IP67, microSD support, 120Hz refresh rate",
    },
    {
        "id": 5,
        "model": "Galaxy Z Flip5",
        "series": "Z",
        "year": 2023,
        "displaySize": "6.7 inches (main), 3.4 inches (cover)",
        "displayType": "Dynamic AMOLED 2X (main), Super AMOLED (cover)",
        "resolution": "2640 x 1080 (main), 720 x 748 (cover)",
        "processor": "Snapdragon 8 Gen 2",
        "ram": "8GB",
        "storageOptions": "256GB, 512GB",
        "mainCamera": "12MP Wide, 12MP Ultra-wide",
        "frontCamera": "10MP",
        "battery": "3700 mAh",
        "price": 999,
        "features": "Foldable display, Flex Mode, IPX8, Wireless Charging",
    },
    {
        "id": 6,
        "model": "Galaxy Z Fold5",
        "series": "Z",
        "year": 2023,
        "displaySize": "7.6 inches (main), 6.2 inches (cover)",
        "displayType": "Dynamic AMOLED 2X",
        "resolution": "2176 x 1812 (main), 2316 x 904 (cover)",
        "processor": "Snapdragon 8 Gen 2",
        "ram": "12GB",
        "storageOptions": "256GB, 512GB, 1TB",
        "mainCamera": "50MP Wide, 12MP Ultra-wide, 10MP Telephoto",
        "frontCamera": "4MP (under display), 10MP (cover)",
        "battery": "4400 mAh",
        "price": 1799,
        "features": "Foldable display, S Pen support, IPX8, Wireless Charging",
    },
    {
        "id": 7,
        "model": "Galaxy S23",
        "series": "S",
        "year": 2023,
        "displaySize": "6.1 inches",
        "displayType": "Dynamic AMOLED 2X",
        "resolution": "2340 x 1080",
        "processor": "Snapdragon 8 Gen 2",
        "ram": "8GB",
        "storageOptions": "128GB, 256GB",
        "mainCamera": "50MP Wide, 12MP Ultra-wide, 10MP Telephoto",
        "frontCamera": "12MP",
        "battery": "3900 mAh",
        "price": 699,
        "features": "IP68, Wireless Charging, Night photography",
    },
    {
        "id": 8,
        "model": "Galaxy S23+",
        "series": "S",
        "year": 2023,
        "displaySize": "6.6 inches",
        "displayType": "Dynamic AMOLED 2X",
        "resolution": "2340 x 1080",
        "processor": "Snapdragon 8 Gen 2",
        "ram": "8GB",
        "storageOptions": "256GB, 512GB",
        "mainCamera": "50MP Wide, 12MP Ultra-wide, 10MP Telephoto",
        "frontCamera": "12MP",
        "battery": "4700 mAh",
        "price": 899,
        "features": "IP68, Wireless Charging, 45W Fast Charging",
    },
]


class InMemoryCatalog(CatalogProvider):
    """An immutable, in-memory catalog snapshot.

    With no devices given, the catalog is seeded with SAMPLE_DEVICES.
    """

    def __init__(self, devices: Iterable[Device] | None = None):
        if devices is None:
            devices = [Device.from_dict(data) for data in SAMPLE_DEVICES]
        self._devices: tuple[Device, ...] = tuple(devices)

        ids = [d.id for d in self._devices]
        if len(ids) != len(set(ids)):
            raise CatalogError("Catalog contains duplicate device ids")

    @classmethod
    def from_json(cls, path: Path | str) -> "InMemoryCatalog":
        """Load a catalog from a JSON file holding a list of device objects."""
        path = Path(path)
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise CatalogError(f"Could not read catalog {path}: {e}") from e

        if not isinstance(data, list):
            raise CatalogError(f"Catalog {path} must contain a JSON list of devices")

        try:
            devices = [Device.from_dict(item) for item in data]
        except (KeyError, TypeError, ValueError) as e:
            raise CatalogError(f"Invalid device in catalog {path}: {e}") from e

        logger.debug("Loaded %d devices from %s", len(devices), path)
        return cls(devices)

    def list_devices(self) -> list[Device]:
        return [d for d in self._devices if d.is_active]

    def get_device(self, device_id: int) -> Device | None:
        """Look up a device by id."""
        return next((d for d in self._devices if d.id == device_id), None)

    def get_by_model(self, model: str) -> Device | None:
        """Look up a device by exact model name."""
        return next((d for d in self._devices if d.model == model), None)

    def filter_by_price_range(self, min_price: int, max_price: int) -> list[Device]:
        """Active devices priced within [min_price, max_price]."""
        return [d for d in self.list_devices() if min_price <= d.price <= max_price]

    def filter_by_series(self, series: Iterable[str]) -> list[Device]:
        """Active devices belonging to any of the given series."""
        wanted = set(series)
        return [d for d in self.list_devices() if d.series in wanted]
