"""Tests for overlap-lane packing."""

import logging
from datetime import datetime, timedelta

import pytest

from facility_calendar.scheduling.models import Appointment
from facility_calendar.scheduling.packer import pack_appointments, pack_lanes


def _at(hour: int, minute: int = 0, day: int = 23) -> datetime:
    return datetime(2025, 6, day, hour, minute)


def _assert_lanes_disjoint(intervals, packing):
    by_id = {interval_id: (start, end) for start, end, interval_id in intervals}
    for members in packing.members:
        spans = sorted(by_id[i] for i in members)
        for (_, prev_end), (next_start, _) in zip(spans, spans[1:]):
            assert prev_end <= next_start


class TestPackLanes:
    def test_empty_scope_has_no_lanes(self):
        packing = pack_lanes([])

        assert packing.lane_count == 0
        assert packing.lanes == {}

    def test_touching_intervals_share_a_lane(self):
        packing = pack_lanes([(_at(9), _at(10), "a"), (_at(10), _at(11), "b")])

        assert packing.lane_count == 1
        assert packing.lane_of("a") == 0
        assert packing.lane_of("b") == 0

    def test_overlapping_intervals_take_lowest_free_lane(self):
        intervals = [
            (_at(9), _at(11), "a"),
            (_at(10), _at(12), "b"),
            (_at(11), _at(13), "c"),
        ]

        packing = pack_lanes(intervals)

        assert packing.lanes == {"a": 0, "b": 1, "c": 0}
        assert packing.members == [["a", "c"], ["b"]]

    def test_input_order_breaks_start_ties(self):
        forward = pack_lanes([(_at(9), _at(10), "a"), (_at(9), _at(10), "b")])
        backward = pack_lanes([(_at(9), _at(10), "b"), (_at(9), _at(10), "a")])

        assert forward.lanes == {"a": 0, "b": 1}
        assert backward.lanes == {"b": 0, "a": 1}

    def test_sorted_by_start_regardless_of_input_order(self):
        packing = pack_lanes([(_at(14), _at(15), "late"), (_at(8), _at(9), "early")])

        assert packing.members == [["early", "late"]]

    def test_repeated_packing_is_deterministic(self):
        intervals = [
            (_at(9), _at(12), "a"),
            (_at(9, 30), _at(10), "b"),
            (_at(10), _at(11), "c"),
            (_at(9), _at(9, 45), "d"),
        ]

        assert pack_lanes(intervals) == pack_lanes(list(intervals))

    def test_no_lane_holds_overlapping_intervals(self):
        intervals = [
            (_at(8), _at(12), "a"),
            (_at(9), _at(10), "b"),
            (_at(9, 30), _at(11), "c"),
            (_at(10), _at(10, 30), "d"),
            (_at(11), _at(13), "e"),
            (_at(12), _at(14), "f"),
            (_at(13), _at(9, day=24), "g"),
        ]

        packing = pack_lanes(intervals)

        assert sorted(packing.lanes) == sorted(i[2] for i in intervals)
        _assert_lanes_disjoint(intervals, packing)

    def test_malformed_interval_packed_with_minimum_duration(self, caplog):
        intervals = [(_at(9), _at(9), "empty"), (_at(9, 2), _at(9, 30), "next")]

        with caplog.at_level(logging.WARNING):
            packing = pack_lanes(intervals)

        assert packing.lanes == {"empty": 0, "next": 1}
        assert "empty" in caplog.text

    def test_malformed_interval_frees_lane_after_minimum_duration(self):
        intervals = [(_at(9), _at(8), "inverted"), (_at(9, 5), _at(10), "after")]

        packing = pack_lanes(intervals)

        assert packing.lanes == {"inverted": 0, "after": 0}

    def test_custom_minimum_duration(self):
        intervals = [(_at(9), _at(9), "empty"), (_at(9, 5), _at(10), "after")]

        packing = pack_lanes(intervals, min_duration=timedelta(minutes=30))

        assert packing.lane_count == 2

    def test_unknown_id_raises(self):
        packing = pack_lanes([(_at(9), _at(10), "a")])

        with pytest.raises(KeyError):
            packing.lane_of("missing")


class TestPackAppointments:
    def test_uses_appointment_times_and_ids(self):
        appointments = [
            Appointment(
                id="1", title="MA", provider="p", facility="f",
                start_time=_at(9), end_time=_at(11),
            ),
            Appointment(
                id="2", title="MA", provider="p", facility="f",
                start_time=_at(10), end_time=_at(12),
            ),
        ]

        packing = pack_appointments(appointments)

        assert packing.lanes == {"1": 0, "2": 1}
        assert packing.lane_count == 2
