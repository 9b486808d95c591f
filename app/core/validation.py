"""Submit-time validation of a registration draft."""
import math
from typing import Optional

from app.core.models import FormDraft

INVALID_NUMBER_MESSAGE = "Latitude and longitude must be valid numbers."
OUT_OF_RANGE_MESSAGE = "Latitude must be between -90 and 90, longitude between -180 and 180."
INVALID_DEPTH_MESSAGE = "Please enter a valid actual depth (m) for drilled borewells."

# Checked in this order after trimming
REQUIRED_TEXT_FIELDS = (
    ("owner_name", "Owner name is required."),
    ("village", "Village is required."),
    ("block", "Block is required."),
    ("district", "District is required."),
)


def parse_number(text: str) -> Optional[float]:
    """Parse free text to a finite float, or None if it is not one."""
    try:
        value = float(text.strip())
    except (AttributeError, ValueError):
        return None
    if not math.isfinite(value):
        return None
    return value


def validate_draft(draft: FormDraft) -> Optional[str]:
    """
    Validate a draft before submission.

    Checks run in order and stop at the first failure.

    Args:
        draft: Current form values

    Returns:
        The error message to show, or None if the draft can be submitted
    """
    latitude = parse_number(draft.latitude)
    longitude = parse_number(draft.longitude)

    if latitude is None or longitude is None:
        return INVALID_NUMBER_MESSAGE
    if not (-90 <= latitude <= 90 and -180 <= longitude <= 180):
        return OUT_OF_RANGE_MESSAGE

    for field_name, message in REQUIRED_TEXT_FIELDS:
        if not getattr(draft, field_name).strip():
            return message

    if draft.has_been_drilled:
        depth = parse_number(draft.actual_depth_m)
        if depth is None or depth <= 0:
            return INVALID_DEPTH_MESSAGE

    return None
