from lapsheet.metadata import (
    extract_key_value_metadata,
    extract_row_metadata,
    extract_scca_header_metadata,
    extract_session_metadata,
    merge_metadata,
)
from lapsheet.models import SessionMetadata
from lapsheet.tokenizer import parse_csv


def test_scca_header_separators():
    text = "Venue    Sebring Full\nVehicle\tNP01-090\t\nRacer, Jason,\n"
    meta = extract_scca_header_metadata(text)
    assert meta.track == "Sebring Full"
    assert meta.car == "NP01-090"
    assert meta.driver_name == "Jason"
    assert meta.session_type is None


def test_scca_header_is_case_insensitive_and_line_anchored():
    text = "racer JANE DOE\nFastest Racer  Bob\nVenueless line\n"
    meta = extract_scca_header_metadata(text)
    assert meta.driver_name == "JANE DOE"
    assert meta.track is None


def test_scca_header_later_line_wins():
    meta = extract_scca_header_metadata("Racer  Jane\nRacer  Janet\n")
    assert meta.driver_name == "Janet"


def test_key_value_lines():
    lines = [
        "Venue,Road Atlanta",
        "Vehicle  Porsche   911 GT3",
        "Racer\tJohn Smith",
        "Championship,SCCA Majors",
        "Championship,Ignored Second",
        "Date,2024-03-15",
        "Racer",
        "",
    ]
    meta = extract_key_value_metadata(lines)
    assert meta.track == "Road Atlanta"
    assert meta.car == "Porsche 911 GT3"
    assert meta.driver_name == "John Smith"
    assert meta.session_type == "SCCA Majors"


def test_row_metadata_two_column_pairs():
    rows = parse_csv(
        "Driver,Someone Else\n"
        "Driver Name,John Smith\n"
        "Car,Miata\n"
        "Track,Road Atlanta\n"
        "Session Type,Qualifying\n"
        "Weather,Dry 24C\n"
        "Lap,Time\n"
    )
    meta = extract_row_metadata(rows)
    assert meta.driver_name == "John Smith"
    assert meta.car == "Miata"
    assert meta.track == "Road Atlanta"
    assert meta.session_type == "Qualifying"
    assert meta.conditions == "Dry 24C"


def test_row_metadata_generic_driver_does_not_override_specific():
    rows = parse_csv("Driver Name,John Smith\nDriver,Someone Else\n")
    assert extract_row_metadata(rows).driver_name == "John Smith"


def test_row_metadata_single_cell_colon_pairs():
    rows = parse_csv("Track: Road Atlanta\nConditions:  Wet\nNo colon here\n")
    meta = extract_row_metadata(rows)
    assert meta.track == "Road Atlanta"
    assert meta.conditions == "Wet"


def test_row_metadata_skips_empty_values():
    rows = parse_csv("Track,\nTrack,Laguna Seca\n")
    assert extract_row_metadata(rows).track == "Laguna Seca"


def test_row_metadata_scan_limit():
    rows = [["Lap", "Time"]] * 30 + [["Track", "Too Late"]]
    assert extract_row_metadata(rows).track is None


def test_merge_first_non_empty_wins():
    merged = merge_metadata(
        SessionMetadata(driver_name="Jane Doe"),
        SessionMetadata(driver_name="Ignored", car="NP01"),
        SessionMetadata(car="Ignored", track="  ", conditions="Dry"),
    )
    assert merged == SessionMetadata(driver_name="Jane Doe", car="NP01", conditions="Dry")


def test_session_metadata_normalizes_blank_values():
    meta = SessionMetadata(driver_name="  ", car=" Miata ")
    assert meta.driver_name is None
    assert meta.car == "Miata"
    assert SessionMetadata().is_empty()


def test_scca_header_beats_row_scanned():
    text = "Racer  Jane Doe\nDriver Name,John Smith\nLap,Time\n1,1:23.456\n"
    meta = extract_session_metadata(text, parse_csv(text))
    assert meta.driver_name == "Jane Doe"


def test_key_value_beats_row_scanned():
    text = "Championship  Club Race\nSession Type,Practice\nLap,Time\n1,1:23.456\n"
    rows = parse_csv(text)
    assert extract_row_metadata(rows).session_type == "Practice"

    meta = extract_session_metadata(text, rows)
    assert meta.session_type == "Club Race"


def test_scca_header_beats_key_value():
    text = "Racer  Jane  Doe\nLap,Time\n1,1:23.456\n"
    assert extract_scca_header_metadata(text).driver_name == "Jane  Doe"
    assert extract_key_value_metadata(text.splitlines()).driver_name == "Jane Doe"

    meta = extract_session_metadata(text, parse_csv(text))
    assert meta.driver_name == "Jane  Doe"
