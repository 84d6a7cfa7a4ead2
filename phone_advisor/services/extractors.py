"""Attribute extractors - Turn free-text device fields into comparable numbers.

Every extractor returns 0 when the text has no matching pattern. 0 means
"incomparable", not "worst": two devices can only be compared on an attribute
when both values are nonzero.
"""

from __future__ import annotations

import re
from typing import Any, Callable, Iterable

from phone_advisor.models import Device

_PROCESSOR_GEN_RE = re.compile(r"Gen\s*(\d+)", re.IGNORECASE)
_MAIN_CAMERA_RE = re.compile(r"(\d+)MP")
_BATTERY_RE = re.compile(r"(\d+)\s*mAh")


def _first_int(pattern: re.Pattern[str], text: Any) -> int:
    if not isinstance(text, str):
        return 0
    match = pattern.search(text)
    return int(match.group(1)) if match else 0


def extract_processor_generation(text: str) -> int:
    """Extract the generation number from e.g. 'Snapdragon 8 Gen 3'."""
    return _first_int(_PROCESSOR_GEN_RE, text)


def extract_main_camera_mp(text: str) -> int:
    """Extract megapixels of the first camera listed, e.g. '200MP Wide, ...' -> 200."""
    return _first_int(_MAIN_CAMERA_RE, text)


def extract_battery_capacity_mah(text: str) -> int:
    """Extract battery capacity, e.g. '5000 mAh' -> 5000."""
    return _first_int(_BATTERY_RE, text)


# Attributes that compare through an extractor, keyed by Device field name
_EXTRACTED: dict[str, Callable[[str], int]] = {
    "processor": extract_processor_generation,
    "main_camera": extract_main_camera_mp,
    "battery": extract_battery_capacity_mah,
}


def compare_attribute(first: Device, second: Device, attribute: str) -> Device | None:
    """Return the device that wins on an attribute, or None for a tie.

    Price: the cheaper device wins. Year: the newer one. Processor, camera
    and battery: the higher extracted value, and None unless both values
    are nonzero. Unknown attributes never have a winner.
    """
    if attribute == "price":
        if first.price == second.price:
            return None
        return first if first.price < second.price else second

    if attribute == "year":
        if first.year == second.year:
            return None
        return first if first.year > second.year else second

    extractor = _EXTRACTED.get(attribute)
    if extractor is None:
        return None

    a = extractor(getattr(first, attribute))
    b = extractor(getattr(second, attribute))
    if a == 0 or b == 0 or a == b:
        return None
    return first if a > b else second


def sort_devices(
    devices: Iterable[Device],
    attribute: str,
    *,
    ascending: bool = True,
) -> list[Device]:
    """Return a new list of devices ordered by an attribute.

    Extracted attributes sort by their numeric value; price and year by
    value; anything else by its lower-cased text.
    """
    extractor = _EXTRACTED.get(attribute)

    def key(device: Device) -> Any:
        if extractor is not None:
            return extractor(getattr(device, attribute))
        value = getattr(device, attribute)
        if attribute in ("price", "year"):
            return value
        return str(value).lower()

    return sorted(devices, key=key, reverse=not ascending)


BEST_UPGRADE_CATEGORIES = ("flagship", "midrange", "foldable", "camera", "battery", "value")

HIGH_RES_CAMERA_MARKERS = ("108MP", "200MP")
LARGE_BATTERY_MIN_MAH = 4500


def value_score(device: Device) -> float:
    """Processor generation points per $1000 of price.

    A Gen N processor is worth N + 2 points (Gen 3 -> 5, Gen 1 -> 3);
    processors without a generation, and free devices, score 0.
    """
    generation = extract_processor_generation(device.processor)
    if generation == 0 or device.price <= 0:
        return 0.0
    return (generation + 2) * 1000 / device.price


def best_upgrades(devices: Iterable[Device], category: str) -> list[Device]:
    """Curated picks for a category, as a new list.

    flagship: S series except FE models. midrange: A series or FE models.
    foldable: Z series. camera: 108MP/200MP main cameras or Ultra models,
    most megapixels first. battery: at least 4500 mAh, largest first.
    value: every device, best value_score first. Filters keep catalog order
    and all sorts are stable.

    Raises:
        ValueError: If category is not one of BEST_UPGRADE_CATEGORIES
    """
    devices = list(devices)
    key = category.strip().lower() if isinstance(category, str) else category

    if key == "flagship":
        return [d for d in devices if d.series == "S" and "FE" not in d.model]
    if key == "midrange":
        return [d for d in devices if d.series == "A" or "FE" in d.model]
    if key == "foldable":
        return [d for d in devices if d.series == "Z"]
    if key == "camera":
        picks = [
            d for d in devices
            if any(marker in d.main_camera for marker in HIGH_RES_CAMERA_MARKERS) or "Ultra" in d.model
        ]
        return sorted(picks, key=lambda d: extract_main_camera_mp(d.main_camera), reverse=True)
    if key == "battery":
        picks = [d for d in devices if extract_battery_capacity_mah(d.battery) >= LARGE_BATTERY_MIN_MAH]
        return sorted(picks, key=lambda d: extract_battery_capacity_mah(d.battery), reverse=True)
    if key == "value":
        return sorted(devices, key=value_score, reverse=True)

    raise ValueError(
        f"Unknown category {category!r} (expected one of: {', '.join(BEST_UPGRADE_CATEGORIES)})"
    )
