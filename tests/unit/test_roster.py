"""Tests for roster parsing and employee matching."""

import json
import logging

import pytest

from valetpay.sdk import Employee, ShiftRecord
from valetpay.sdk.employee import (
    find_employee,
    match_employee,
    parse_roster,
    surname_key,
)


class TestParseRoster:
    """Rosters arrive as lists, JSON strings or double-encoded strings."""

    def test_none_and_empty(self):
        assert parse_roster(None) == []
        assert parse_roster("") == []
        assert parse_roster("   ") == []

    def test_list_passes_through(self):
        roster = [{"name": "ana", "hours": 5}]

        assert parse_roster(roster) == roster

    def test_json_array_string(self):
        raw = json.dumps([{"name": "ana", "hours": 5, "cashPaid": 2}, {"name": "ben", "hours": 3}])

        entries = parse_roster(raw)

        assert [e["name"] for e in entries] == ["ana", "ben"]
        assert entries[0]["cashPaid"] == 2

    def test_json_object_string(self):
        assert parse_roster('{"name": "ana", "hours": 5}') == [{"name": "ana", "hours": 5}]

    def test_double_encoded_backslash_form(self):
        raw = '{"{\\"name\\":\\"kevin\\",\\"hours\\":6,\\"cashPaid\\":19}","{\\"name\\":\\"lia\\",\\"hours\\":2}"}'

        entries = parse_roster(raw)

        assert entries == [
            {"name": "kevin", "hours": 6, "cashPaid": 19},
            {"name": "lia", "hours": 2},
        ]

    def test_double_encoded_doubled_quote_form(self):
        raw = '{"{""name"":""kevin"",""hours"":6}"}'

        assert parse_roster(raw) == [{"name": "kevin", "hours": 6}]

    def test_wrapped_entries_without_numeric_hours_dropped(self):
        raw = '{"{\\"name\\":\\"kevin\\",\\"hours\\":\\"six\\"}","{\\"name\\":\\"lia\\",\\"hours\\":2}"}'

        assert parse_roster(raw) == [{"name": "lia", "hours": 2}]

    def test_nameless_entries_dropped(self):
        entries = parse_roster([{"name": "", "hours": 4}, {"hours": 2}, {"name": "ana", "hours": 1}])

        assert entries == [{"name": "ana", "hours": 1}]

    def test_garbage_yields_empty(self):
        assert parse_roster("not a roster") == []
        assert parse_roster(42) == []

    def test_shift_record_parses_string_roster(self):
        shift = ShiftRecord.model_validate({
            "id": "s1",
            "locationId": 1,
            "date": "2025-06-01",
            "employees": json.dumps([{"name": "ana", "hours": 5, "cashPaid": None}]),
        })

        assert len(shift.employees) == 1
        assert shift.employees[0].hours == 5
        assert shift.employees[0].cash_paid == 0
        assert shift.roster_hours == 5

    @pytest.mark.parametrize("encode", [list, json.dumps])
    def test_null_hours_count_as_zero(self, encode):
        roster = [{"name": "ana", "hours": None}, {"name": "ben", "hours": 5}]

        shift = ShiftRecord.model_validate({
            "id": "s1", "locationId": 1, "date": "2025-06-01", "employees": encode(roster),
        })

        assert [(e.name, e.hours) for e in shift.employees] == [("ana", 0), ("ben", 5)]
        assert shift.roster_hours == 5

    def test_wrapped_entry_with_null_hours_kept(self):
        raw = '{"{\\"name\\":\\"kevin\\",\\"hours\\":null}","{\\"name\\":\\"lia\\",\\"hours\\":2}"}'

        assert parse_roster(raw) == [{"name": "kevin", "hours": None}, {"name": "lia", "hours": 2}]


class TestMatchEmployee:
    """Roster names match an employee's key or full name, case-insensitively."""

    employee = Employee(key="kevin", full_name="Kevin Ortiz")

    def test_key_match(self):
        assert match_employee("kevin", self.employee)
        assert match_employee("  KEVIN ", self.employee)

    def test_full_name_match(self):
        assert match_employee("kevin ortiz", self.employee)

    def test_no_partial_match(self):
        assert not match_employee("kev", self.employee)
        assert not match_employee("Ortiz", self.employee)
        assert not match_employee("", self.employee)


class TestFindEmployee:
    """A roster name resolves to at most one employee."""

    def test_key_and_full_name(self):
        kevin = Employee(key="kevin", full_name="Kevin Ortiz")
        ana = Employee(key="ana", full_name="Ana Zamora")

        assert find_employee("Kevin", [ana, kevin]) is kevin
        assert find_employee("ana zamora", [ana, kevin]) is ana
        assert find_employee("zoe", [ana, kevin]) is None
        assert find_employee("", [ana, kevin]) is None

    def test_key_match_wins_over_full_name(self, caplog):
        john = Employee(key="john", full_name="John Smith")
        jd = Employee(key="jd", full_name="John")

        with caplog.at_level(logging.WARNING):
            assert find_employee("john", [jd, john]) is john

        assert "matches john, jd" in caplog.text


class TestSurnameKey:
    def test_last_token(self):
        assert surname_key("Maria de la Cruz") == "cruz"
        assert surname_key("Prince") == "prince"
        assert surname_key("") == ""
