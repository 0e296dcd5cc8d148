"""Unit tests for deduplication logic.

Pure function tests - no mocks needed.
"""

import pytest

from src.core.alert import PointGeometry, PolygonGeometry, RawAlertEvent
from src.core.dedup import (
    AlertKey,
    dedupe,
    filter_relevant,
    make_alert_id,
    make_alert_key,
)


NEAR = PointGeometry(latitude=37.8, longitude=-122.42)
FAR = PointGeometry(latitude=34.05, longitude=-118.24)


def make_event(title="Flood Warning", description="", severity="severe", geometry=NEAR, **kwargs):
    """Create a raw event with sensible defaults."""
    return RawAlertEvent(
        title=title,
        description=description,
        severity=severity,
        start_time=kwargs.get("start_time", "2024-05-01T12:00:00Z"),
        end_time=kwargs.get("end_time", "2024-05-01T18:00:00Z"),
        geometry=geometry,
        insight=kwargs.get("insight", "floods"),
    )


class TestMakeAlertKey:
    """Tests for make_alert_key() function."""

    def test_builds_key_from_identity_fields(self):
        event = make_event()

        key = make_alert_key(event)

        assert key == AlertKey(
            title="Flood Warning",
            start_time="2024-05-01T12:00:00Z",
            end_time="2024-05-01T18:00:00Z",
            severity="severe",
            geometry=NEAR,
        )

    def test_ignores_description_and_insight(self):
        a = make_event(description="first wording", insight="floods")
        b = make_event(description="second wording", insight="thunderstorms")

        assert make_alert_key(a) == make_alert_key(b)

    @pytest.mark.parametrize("changes", [
        {"title": "Flood Watch"},
        {"severity": "extreme"},
        {"start_time": "2024-05-01T13:00:00Z"},
        {"end_time": "2024-05-01T19:00:00Z"},
        {"geometry": PointGeometry(latitude=37.80001, longitude=-122.42)},
    ])
    def test_any_identity_field_difference_changes_key(self, changes):
        assert make_alert_key(make_event()) != make_alert_key(make_event(**changes))

    def test_overlapping_geometries_are_distinct(self):
        """Key equality is exact, not geometric overlap."""
        square = PolygonGeometry(ring=((0.0, 0.0), (1.0, 0.0), (1.0, 1.0), (0.0, 0.0)))
        rotated = PolygonGeometry(ring=((1.0, 0.0), (1.0, 1.0), (0.0, 0.0), (1.0, 0.0)))

        assert make_alert_key(make_event(geometry=square)) != make_alert_key(make_event(geometry=rotated))


class TestMakeAlertId:
    """Tests for make_alert_id() function."""

    def test_stable_for_equal_keys(self):
        assert make_alert_id(make_alert_key(make_event())) == make_alert_id(make_alert_key(make_event()))

    def test_differs_for_different_keys(self):
        a = make_alert_id(make_alert_key(make_event(title="A")))
        b = make_alert_id(make_alert_key(make_event(title="B")))
        assert a != b

    def test_is_short_hex(self):
        alert_id = make_alert_id(make_alert_key(make_event()))
        assert len(alert_id) == 16
        int(alert_id, 16)


class TestDedupe:
    """Tests for dedupe() function."""

    def test_keeps_first_of_duplicates(self):
        first = make_event(description="first")
        second = make_event(description="second")

        result = dedupe([first, second])

        assert len(result) == 1
        assert result[0] is first

    def test_preserves_first_seen_order(self):
        a = make_event(title="A")
        b = make_event(title="B")
        c = make_event(title="C")

        result = dedupe([b, a, b, c, a])

        assert [e.title for e in result] == ["B", "A", "C"]

    def test_empty(self):
        assert dedupe([]) == []


class TestFilterRelevant:
    """Tests for filter_relevant() single-pass filter."""

    def test_drops_out_of_range(self):
        near = make_event(title="Near")
        far = make_event(title="Far", geometry=FAR)

        result = filter_relevant([near, far], 37.77, -122.42, 50.0)

        assert result == [near]

    def test_drops_duplicates_in_range(self):
        first = make_event(description="first")
        second = make_event(description="second")

        result = filter_relevant([first, second], 37.77, -122.42, 50.0)

        assert result == [first]

    def test_drops_events_without_geometry(self):
        result = filter_relevant([make_event(geometry=None)], 37.77, -122.42, 50.0)
        assert result == []

    def test_preserves_order(self):
        events = [make_event(title=t) for t in ("C", "A", "B")]

        result = filter_relevant(events, 37.77, -122.42, 50.0)

        assert [e.title for e in result] == ["C", "A", "B"]
