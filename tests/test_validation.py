"""Tests for submit-time validation."""
import pytest
from app.core.models import FormDraft
from app.core.validation import (
    validate_draft,
    parse_number,
    INVALID_NUMBER_MESSAGE,
    OUT_OF_RANGE_MESSAGE,
    INVALID_DEPTH_MESSAGE,
)


def test_valid_draft_passes(valid_draft):
    """Test a complete draft has no error."""
    assert validate_draft(valid_draft) is None


@pytest.mark.parametrize("lat,lon", [
    ("-90", "-180"),
    ("90", "180"),
    ("0", "0"),
    ("22.72", "75.86"),
    (" -33.8688 ", "151.2093"),
])
def test_coordinates_in_range_pass(valid_draft, lat, lon):
    """Test boundary and typical coordinates are accepted."""
    valid_draft.latitude = lat
    valid_draft.longitude = lon
    assert validate_draft(valid_draft) is None


@pytest.mark.parametrize("lat,lon", [
    ("", "75.86"),
    ("22.72", ""),
    ("abc", "75.86"),
    ("22.72", "east"),
    ("nan", "75.86"),
    ("22.72", "inf"),
])
def test_unparseable_coordinates(valid_draft, lat, lon):
    """Test non-numeric coordinates fail with the number message."""
    valid_draft.latitude = lat
    valid_draft.longitude = lon
    assert validate_draft(valid_draft) == INVALID_NUMBER_MESSAGE


@pytest.mark.parametrize("lat,lon", [
    ("91", "75.86"),
    ("-90.0001", "75.86"),
    ("22.72", "180.5"),
    ("22.72", "-181"),
])
def test_out_of_range_coordinates(valid_draft, lat, lon):
    """Test coordinates outside the globe fail with the range message."""
    valid_draft.latitude = lat
    valid_draft.longitude = lon
    assert validate_draft(valid_draft) == OUT_OF_RANGE_MESSAGE


def test_range_checked_before_required_fields():
    """Test the first failing rule wins."""
    draft = FormDraft(latitude="91", longitude="0")
    assert validate_draft(draft) == OUT_OF_RANGE_MESSAGE


@pytest.mark.parametrize("field,message", [
    ("owner_name", "Owner name is required."),
    ("village", "Village is required."),
    ("block", "Block is required."),
    ("district", "District is required."),
])
def test_required_text_fields(valid_draft, field, message):
    """Test blank or whitespace-only required fields are rejected."""
    setattr(valid_draft, field, "   ")
    assert validate_draft(valid_draft) == message


def test_required_fields_checked_in_order():
    """Test owner name is reported before village."""
    draft = FormDraft(latitude="1", longitude="1")
    assert validate_draft(draft) == "Owner name is required."


@pytest.mark.parametrize("depth", ["0", "-5", "abc", "", "0.0"])
def test_drilled_requires_positive_depth(valid_draft, depth):
    """Test drilled borewells need a positive depth."""
    valid_draft.has_been_drilled = True
    valid_draft.actual_depth_m = depth
    assert validate_draft(valid_draft) == INVALID_DEPTH_MESSAGE


def test_drilled_with_valid_depth(valid_draft):
    """Test a positive decimal depth passes."""
    valid_draft.has_been_drilled = True
    valid_draft.actual_depth_m = "120.5"
    assert validate_draft(valid_draft) is None


def test_depth_ignored_when_not_drilled(valid_draft):
    """Test depth text does not matter for undrilled borewells."""
    valid_draft.actual_depth_m = "abc"
    assert validate_draft(valid_draft) is None


def test_parse_number():
    """Test free-text number parsing."""
    assert parse_number("10.5") == 10.5
    assert parse_number(" 7 ") == 7.0
    assert parse_number("") is None
    assert parse_number("1e999") is None
