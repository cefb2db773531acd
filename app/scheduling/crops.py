from typing import Any, Iterable, List, Optional

from ..records import CropRecord
from ..temporal.normalizer import INVALID_DATE, normalize

ACTIVE_STATUSES = ("growing", "flowering")


def active_crops(crops: Iterable[CropRecord]) -> List[CropRecord]:
    """Crops still in the field (growing or flowering)."""
    return [crop for crop in crops if crop.status in ACTIVE_STATUSES]


def crop_label(crop: Optional[CropRecord]) -> str:
    if crop is None:
        return "Unknown Crop"
    name = crop.crop_name or ""
    return f"{name} - {crop.variety}" if crop.variety else name


def days_to_harvest(crop: CropRecord, now: Any) -> Optional[int]:
    """Whole calendar days from ``now`` until the expected harvest.

    Negative once the harvest date has passed. ``None`` when either date does
    not normalize.
    """
    harvest = normalize(crop.expected_harvest_date).calendar_date
    today = normalize(now).calendar_date
    if harvest is None or today is None:
        return None
    return (harvest - today).days


def harvest_label(crop: CropRecord, now: Any) -> Optional[str]:
    """Countdown text for a crop card.

    ``None`` when there is nothing to count down to: no expected harvest date,
    or the crop is already harvested.
    """
    if crop.status == "harvested" or crop.expected_harvest_date in (None, ""):
        return None

    days = days_to_harvest(crop, now)
    if days is None:
        return INVALID_DATE
    if days < 0:
        return "Past due"
    if days == 0:
        return "Today"
    return "1 day" if days == 1 else f"{days} days"
