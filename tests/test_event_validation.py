"""
Tests for event input validation
"""

import uuid
import pytest
from datetime import datetime

from app.core.errors import ValidationFailed
from app.schemas.event import EventCreate, EventUpdate, EventsQuery, parse_iso_datetime
from app.services.validation import validate_input

def valid_payload(**overrides):
    payload = {
        "name": "Summer Cup",
        "sport_type": "Soccer",
        "date_time": "2025-07-04T18:30:00Z",
        "description": "Five-a-side tournament",
        "venues": [{"name": "Riverside Park", "address": "1 River Rd"}],
    }
    payload.update(overrides)
    return payload

def test_valid_create_payload():
    """A complete payload yields a typed command"""
    command = validate_input(EventCreate, valid_payload())

    assert command.name == "Summer Cup"
    assert command.sport_type == "Soccer"
    assert command.starts_at == datetime(2025, 7, 4, 18, 30)
    assert len(command.venues) == 1
    assert command.venues[0].address == "1 River Rd"

def test_optional_fields_may_be_omitted():
    payload = valid_payload(venues=[{"name": "Court 3"}])
    del payload["description"]

    command = validate_input(EventCreate, payload)

    assert command.description is None
    assert command.venues[0].address is None

def test_zero_venues_rejected():
    with pytest.raises(ValidationFailed) as exc_info:
        validate_input(EventCreate, valid_payload(venues=[]))

    assert exc_info.value.message == "venues: At least one venue is required"

def test_too_many_venues_rejected():
    venues = [{"name": f"Field {i}"} for i in range(11)]
    with pytest.raises(ValidationFailed) as exc_info:
        validate_input(EventCreate, valid_payload(venues=venues))

    assert exc_info.value.message.startswith("venues:")

def test_ten_venues_allowed():
    venues = [{"name": f"Field {i}"} for i in range(10)]
    command = validate_input(EventCreate, valid_payload(venues=venues))
    assert len(command.venues) == 10

def test_name_too_long_rejected():
    with pytest.raises(ValidationFailed) as exc_info:
        validate_input(EventCreate, valid_payload(name="x" * 201))

    assert exc_info.value.message.startswith("name:")

def test_empty_name_rejected():
    with pytest.raises(ValidationFailed) as exc_info:
        validate_input(EventCreate, valid_payload(name=""))

    assert exc_info.value.message == "name: Event name is required"

def test_unknown_sport_rejected():
    with pytest.raises(ValidationFailed) as exc_info:
        validate_input(EventCreate, valid_payload(sport_type="Quidditch"))

    assert exc_info.value.message.startswith("sport_type: Sport type must be one of")

def test_date_time_must_be_iso():
    with pytest.raises(ValidationFailed) as exc_info:
        validate_input(EventCreate, valid_payload(date_time="next tuesday"))
    assert exc_info.value.message.startswith("date_time:")

    with pytest.raises(ValidationFailed) as exc_info:
        validate_input(EventCreate, valid_payload(date_time=""))
    assert exc_info.value.message == "date_time: Date and time are required"

def test_description_too_long_rejected():
    with pytest.raises(ValidationFailed) as exc_info:
        validate_input(EventCreate, valid_payload(description="d" * 2001))
    assert exc_info.value.message.startswith("description:")

def test_nested_venue_error_names_its_path():
    venues = [{"name": "Court 1"}, {"name": ""}]
    with pytest.raises(ValidationFailed) as exc_info:
        validate_input(EventCreate, valid_payload(venues=venues))

    assert exc_info.value.message == "venues.1.name: Venue name is required"

def test_venue_address_too_long_rejected():
    venues = [{"name": "Court 1", "address": "a" * 501}]
    with pytest.raises(ValidationFailed) as exc_info:
        validate_input(EventCreate, valid_payload(venues=venues))
    assert exc_info.value.message.startswith("venues.0.address:")

def test_only_first_error_reported():
    """Several bad fields still produce one message, for the first field"""
    with pytest.raises(ValidationFailed) as exc_info:
        validate_input(EventCreate, valid_payload(name="", sport_type="Quidditch", venues=[]))

    assert exc_info.value.message == "name: Event name is required"

def test_update_requires_uuid():
    with pytest.raises(ValidationFailed) as exc_info:
        validate_input(EventUpdate, valid_payload(id="not-a-uuid"))
    assert exc_info.value.message.startswith("id:")

    event_id = uuid.uuid4()
    command = validate_input(EventUpdate, valid_payload(id=str(event_id)))
    assert command.id == event_id

def test_non_object_payload_rejected():
    with pytest.raises(ValidationFailed):
        validate_input(EventCreate, None)

def test_query_defaults():
    query = validate_input(EventsQuery, {})

    assert query.search_query is None
    assert query.sport_filter is None
    assert query.limit == 50
    assert query.offset == 0

def test_query_accepts_string_numbers_and_aliases():
    """Query strings arrive as text"""
    query = validate_input(EventsQuery, {"searchQuery": "cup", "sportFilter": "all", "limit": "10", "offset": "20"})

    assert query.search_query == "cup"
    assert query.sport_filter == "all"
    assert query.limit == 10
    assert query.offset == 20

@pytest.mark.parametrize("params,field", [
    ({"limit": 0}, "limit"),
    ({"limit": 101}, "limit"),
    ({"offset": -1}, "offset"),
    ({"searchQuery": "s" * 101}, "searchQuery"),
    ({"sportFilter": "Curling"}, "sportFilter"),
])
def test_query_bounds(params, field):
    with pytest.raises(ValidationFailed) as exc_info:
        validate_input(EventsQuery, params)
    assert exc_info.value.message.startswith(f"{field}:")

def test_parse_iso_datetime_normalizes_to_utc():
    assert parse_iso_datetime("2025-07-04T20:30:00+02:00") == datetime(2025, 7, 4, 18, 30)
    assert parse_iso_datetime("2025-07-04T18:30") == datetime(2025, 7, 4, 18, 30)

def test_empty_sport_filter_means_no_filter():
    """?sportFilter= arrives as an empty string"""
    query = validate_input(EventsQuery, {"sportFilter": ""})
    assert query.sport_filter is None

def test_lowercase_z_suffix_accepted():
    command = validate_input(EventCreate, valid_payload(date_time="2025-07-04T18:30:00z"))
    assert command.starts_at == datetime(2025, 7, 4, 18, 30)
