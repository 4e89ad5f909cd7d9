"""
Unit tests for org timestamp parsing and comparison.
"""

from datetime import datetime

import pytest

from marks.errors import TimestampParseError
from marks.models.org import OrgDatePlan, OrgDateTime
from marks.parsers.timestamp import (
    format_org_timestamp,
    is_timestamp_line,
    parse_org_timestamp,
    timestamp_from_argument,
    try_parse_org_timestamp,
)


class TestParseOrgTimestamp:
    """Test cases for parse_org_timestamp."""

    def test_scheduled_date_only(self):
        """Test a scheduled date without time."""
        ts = parse_org_timestamp("SCHEDULED: <2021-08-28 Sat>")

        assert ts.plan == OrgDatePlan.SCHEDULED
        assert ts.is_active is True
        assert ts.start == datetime(2021, 8, 28)
        assert ts.end is None
        assert ts.interval is None
        assert not ts.has_time()

    def test_deadline_with_range_and_interval(self):
        """Test an inactive deadline with a time range and repeater."""
        ts = parse_org_timestamp("DEADLINE: [2020-12-24 Thu 13:30-22:35 +1y]")

        assert ts.plan == OrgDatePlan.DEADLINE
        assert ts.is_active is False
        assert ts.start == datetime(2020, 12, 24, 13, 30)
        assert ts.end == datetime(2020, 12, 24, 22, 35)
        assert ts.interval == "+1y"
        assert ts.has_time()

    def test_plain_timestamp(self):
        """Test a timestamp without a label."""
        ts = parse_org_timestamp("<2003-09-16 Tue 12:00>")

        assert ts.plan == OrgDatePlan.PLAIN
        assert ts.start == datetime(2003, 9, 16, 12, 0)

    def test_label_is_case_insensitive_and_indent_allowed(self):
        """Test lower case labels and leading whitespace."""
        ts = parse_org_timestamp("   deadline: <2021-01-02>")

        assert ts.plan == OrgDatePlan.DEADLINE
        assert ts.start == datetime(2021, 1, 2)

    def test_any_trailing_token_is_the_interval(self):
        """Test that a trailing token is kept verbatim whatever it starts with."""
        ts = parse_org_timestamp("<2021-08-28 Sat 10:00 foo>")

        assert ts.start == datetime(2021, 8, 28, 10, 0)
        assert ts.interval == "foo"
        assert parse_org_timestamp("SCHEDULED: [2021-08-28 Sat .+1w/2w]").interval == ".+1w/2w"

    def test_trailing_text_is_ignored(self):
        """Test that text after the closing bracket is ignored."""
        ts = parse_org_timestamp("SCHEDULED: <2021-08-28 Sat> DEADLINE: <2021-09-01 Wed>")

        assert ts.plan == OrgDatePlan.SCHEDULED
        assert ts.start == datetime(2021, 8, 28)

    @pytest.mark.parametrize("line", [
        "SCHEDULED: <2021-8-28>",
        "SCHEDULED: <2021-08-28 Sat",
        "SCHEDULED: <2021-08-28 Sat]",
        "SCHEDULED: 2021-08-28",
        "SCHEDULED: <2021-02-30>",
        "SCHEDULED: <2021-08-28 25:00>",
    ])
    def test_malformed(self, line):
        """Test malformed timestamps."""
        with pytest.raises(TimestampParseError):
            parse_org_timestamp(line)

    def test_try_parse_returns_none(self):
        """Test that the lenient variant swallows parse errors."""
        assert try_parse_org_timestamp("DEADLINE: <nope>") is None

    def test_is_timestamp_line(self):
        """Test label detection."""
        assert is_timestamp_line("  SCHEDULED: <2021-08-28>")
        assert is_timestamp_line("deadline: whatever")
        assert not is_timestamp_line("<2021-08-28>")
        assert not is_timestamp_line("Some text")


class TestFormatOrgTimestamp:
    """Test cases for format_org_timestamp."""

    def test_round_trip(self):
        """Test that formatted timestamps parse back to equal values."""
        for line in [
            "SCHEDULED: <2021-08-28 Sat>",
            "DEADLINE: [2020-12-24 Thu 13:30-22:35 +1y]",
            "<2003-09-16 Tue 12:00 .+2d>",
        ]:
            ts = parse_org_timestamp(line)
            assert parse_org_timestamp(format_org_timestamp(ts)) == ts

    def test_format_text(self):
        """Test the exact formatted text."""
        ts = parse_org_timestamp("deadline: <2020-12-24 Thu 13:30>")

        assert format_org_timestamp(ts) == "DEADLINE: <2020-12-24 Thu 13:30>"


class TestTimestampFromArgument:
    """Test cases for command line timestamps."""

    def test_bare_date(self):
        """Test a bare date."""
        ts = timestamp_from_argument("2021-08-28", OrgDatePlan.SCHEDULED)

        assert ts.plan == OrgDatePlan.SCHEDULED
        assert ts.start == datetime(2021, 8, 28)

    def test_bare_date_with_time(self):
        """Test a bare date with a time of day."""
        ts = timestamp_from_argument("2021-08-28 10:15", OrgDatePlan.DEADLINE)

        assert ts.start == datetime(2021, 8, 28, 10, 15)

    def test_given_plan_wins(self):
        """Test that the label inside the value is overridden."""
        ts = timestamp_from_argument("SCHEDULED: <2021-08-28 Sat>", OrgDatePlan.DEADLINE)

        assert ts.plan == OrgDatePlan.DEADLINE

    def test_invalid(self):
        """Test an invalid value."""
        with pytest.raises(TimestampParseError):
            timestamp_from_argument("tomorrow", OrgDatePlan.SCHEDULED)


class TestCompareWith:
    """Test cases for OrgDateTime.compare_with."""

    def setup_method(self):
        """Set up test fixtures."""
        self.scheduled_morning = OrgDateTime(plan=OrgDatePlan.SCHEDULED, start=datetime(2021, 8, 28, 9, 0))

    def test_date_only_other_compares_dates(self):
        """Test that a date-only argument ignores this timestamp's time."""
        other = OrgDateTime(plan=OrgDatePlan.SCHEDULED, start=datetime(2021, 8, 28))

        assert self.scheduled_morning.compare_with(other)

    def test_timed_other_compares_exactly(self):
        """Test that a timed argument compares full timestamps."""
        same = OrgDateTime(plan=OrgDatePlan.SCHEDULED, start=datetime(2021, 8, 28, 9, 0))
        later = OrgDateTime(plan=OrgDatePlan.SCHEDULED, start=datetime(2021, 8, 28, 10, 0))

        assert self.scheduled_morning.compare_with(same)
        assert not self.scheduled_morning.compare_with(later)

    def test_asymmetry(self):
        """Test that only the argument's time of day decides the comparison mode."""
        date_only = OrgDateTime(plan=OrgDatePlan.SCHEDULED, start=datetime(2021, 8, 28))

        assert self.scheduled_morning.compare_with(date_only)
        assert not date_only.compare_with(self.scheduled_morning)

    def test_plans_must_match(self):
        """Test that different plans never compare equal."""
        deadline = OrgDateTime(plan=OrgDatePlan.DEADLINE, start=datetime(2021, 8, 28, 9, 0))

        assert not self.scheduled_morning.compare_with(deadline)

    def test_custom_comparators(self):
        """Test injected comparison functions."""
        other = OrgDateTime(plan=OrgDatePlan.SCHEDULED, start=datetime(2021, 9, 1))

        assert self.scheduled_morning.compare_with(other, date_only_compare=lambda a, b: a < b)

    def test_range_must_stay_on_one_day(self):
        """Test that an end on another day is rejected."""
        with pytest.raises(ValueError):
            OrgDateTime(start=datetime(2021, 8, 28, 9), end=datetime(2021, 8, 29, 9))
