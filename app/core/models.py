"""Data models for borewell registration."""
import math
from dataclasses import dataclass, asdict
from enum import Enum
from typing import Optional, Dict, Any


class Purpose(str, Enum):
    """Primary use of the borewell."""
    IRRIGATION = "irrigation"
    DRINKING = "drinking"
    DOMESTIC = "domestic"
    INDUSTRIAL = "industrial"
    OTHER = "other"

    @property
    def label(self) -> str:
        return _PURPOSE_LABELS[self]


_PURPOSE_LABELS = {
    Purpose.IRRIGATION: "Irrigation",
    Purpose.DRINKING: "Drinking water",
    Purpose.DOMESTIC: "Domestic / household",
    Purpose.INDUSTRIAL: "Industrial / commercial",
    Purpose.OTHER: "Other / mixed",
}


class Outcome(str, Enum):
    """Ground-truth result of drilling."""
    SUCCESS = "success"
    LOW_YIELD = "low_yield"
    FAILED = "failed"

    @property
    def label(self) -> str:
        return _OUTCOME_LABELS[self]


_OUTCOME_LABELS = {
    Outcome.SUCCESS: "Successful (good yield)",
    Outcome.LOW_YIELD: "Low yield / marginal",
    Outcome.FAILED: "Failed / dry",
}


@dataclass(frozen=True)
class Position:
    """A single geolocation fix."""
    latitude: float
    longitude: float
    accuracy: Optional[float] = None


@dataclass(frozen=True)
class GeolocationState:
    """Snapshot of the device probe. Replaced wholesale on every update."""
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    accuracy: Optional[float] = None
    error: Optional[str] = None
    loading: bool = False

    @property
    def has_fix(self) -> bool:
        return self.latitude is not None and self.longitude is not None

    @property
    def is_terminal(self) -> bool:
        return not self.loading and (self.has_fix or self.error is not None)

    @classmethod
    def from_position(cls, position: Position) -> "GeolocationState":
        return cls(
            latitude=position.latitude,
            longitude=position.longitude,
            accuracy=position.accuracy,
            error=None,
            loading=False,
        )


def format_coordinate(value: float) -> str:
    """Format a coordinate the way the form fields show it (6 decimals)."""
    return f"{value:.6f}"


@dataclass
class FormDraft:
    """In-progress, user-editable form values.

    Latitude, longitude and depth are kept as raw text so partially typed
    input is never rewritten under the user.
    """
    latitude: str = ""
    longitude: str = ""
    owner_name: str = ""
    village: str = ""
    block: str = ""
    district: str = ""
    purpose: Purpose = Purpose.IRRIGATION
    land_parcel_id: str = ""
    has_been_drilled: bool = False
    actual_depth_m: str = ""
    actual_outcome: Outcome = Outcome.SUCCESS

    def __post_init__(self):
        # Reject out-of-range enumeration values at the boundary
        self.purpose = Purpose(self.purpose)
        self.actual_outcome = Outcome(self.actual_outcome)


@dataclass(frozen=True)
class BorewellPayload:
    """Request body for POST /borewells/."""
    latitude: float
    longitude: float
    owner_name: str
    village: str
    block: str
    district: str
    purpose: Purpose
    land_parcel_id: Optional[str]
    has_been_drilled: bool
    actual_depth_m: Optional[float]
    actual_outcome: Optional[Outcome]

    @classmethod
    def from_draft(cls, draft: FormDraft) -> "BorewellPayload":
        """Build a payload from a draft that already passed validation."""
        drilled = draft.has_been_drilled
        return cls(
            latitude=float(draft.latitude),
            longitude=float(draft.longitude),
            owner_name=draft.owner_name.strip(),
            village=draft.village.strip(),
            block=draft.block.strip(),
            district=draft.district.strip(),
            purpose=Purpose(draft.purpose),
            land_parcel_id=draft.land_parcel_id.strip() or None,
            has_been_drilled=drilled,
            actual_depth_m=float(draft.actual_depth_m) if drilled else None,
            actual_outcome=Outcome(draft.actual_outcome) if drilled else None,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the JSON wire shape."""
        data = asdict(self)
        data["purpose"] = self.purpose.value
        data["actual_outcome"] = self.actual_outcome.value if self.actual_outcome else None
        return data


def _optional_float(data: Dict[str, Any], key: str) -> Optional[float]:
    value = data.get(key)
    if value is None:
        return None
    if isinstance(value, bool):
        raise ValueError(f"Field '{key}' must be a number")
    try:
        return float(value)
    except (TypeError, ValueError) as e:
        raise ValueError(f"Field '{key}' must be a number") from e


def _optional_bool(data: Dict[str, Any], key: str) -> Optional[bool]:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, bool):
        raise ValueError(f"Field '{key}' must be a boolean")
    return value


@dataclass(frozen=True)
class SubmissionResult:
    """Registry response for a saved borewell."""
    id: int
    latitude: float
    longitude: float
    predicted_feasible: Optional[bool] = None
    predicted_depth_m: Optional[float] = None
    model_version: Optional[str] = None
    actual_feasible: Optional[bool] = None
    actual_depth_m: Optional[float] = None

    @classmethod
    def from_dict(cls, data: Any) -> "SubmissionResult":
        """
        Parse a response body.

        Raises:
            ValueError: If the body is not an object or required fields are
                missing or mistyped.
        """
        if not isinstance(data, dict):
            raise ValueError("Response body must be a JSON object")
        for key in ("id", "latitude", "longitude"):
            if data.get(key) is None:
                raise ValueError(f"Response is missing '{key}'")
        try:
            borewell_id = int(data["id"])
            latitude = float(data["latitude"])
            longitude = float(data["longitude"])
        except (TypeError, ValueError) as e:
            raise ValueError(f"Malformed response: {e}") from e
        if not (math.isfinite(latitude) and math.isfinite(longitude)):
            raise ValueError("Response coordinates must be finite")

        model_version = data.get("model_version")
        return cls(
            id=borewell_id,
            latitude=latitude,
            longitude=longitude,
            predicted_feasible=_optional_bool(data, "predicted_feasible"),
            predicted_depth_m=_optional_float(data, "predicted_depth_m"),
            model_version=str(model_version) if model_version is not None else None,
            actual_feasible=_optional_bool(data, "actual_feasible"),
            actual_depth_m=_optional_float(data, "actual_depth_m"),
        )

    @property
    def location_text(self) -> str:
        return f"{format_coordinate(self.latitude)}, {format_coordinate(self.longitude)}"

    @property
    def model_version_text(self) -> str:
        return self.model_version or "N/A"

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return asdict(self)
