"""
Structural document models for Marks.

This module defines the data recovered from heading lines of Markdown and
org-mode documents: TODO states, priorities, SCHEDULED/DEADLINE timestamps,
tags and property drawers.
"""

import operator
from typing import Callable, Dict, List, Optional, Any
from datetime import datetime, date
from enum import Enum
from pydantic import BaseModel, ConfigDict, Field, model_validator


class OrgDatePlan(Enum):
    """What kind of date an org timestamp is."""
    SCHEDULED = "scheduled"
    DEADLINE = "deadline"
    PLAIN = "plain"


class TodoKeyword(Enum):
    """Known TODO states. Any other all-uppercase word is OTHER."""
    TODO = "TODO"
    DONE = "DONE"
    OTHER = "OTHER"


class OrgDateTime(BaseModel):
    """
    A single org-mode timestamp.

    Some possible formats:
        <2003-09-16 Tue>
        <2003-09-16 Tue 12:00-12:30>
        [2003-09-16 Tue 12:00 +1w]

    Attributes:
        plan: SCHEDULED, DEADLINE or a plain date
        is_active: True for <...> timestamps, False for [...]
        start: First date found in the timestamp
        end: End of an HH:MM-HH:MM range, always on the same day as start
        interval: Repeater/interval token kept verbatim (e.g. '+1y')
    """

    model_config = ConfigDict(frozen=True)

    plan: OrgDatePlan = Field(OrgDatePlan.PLAIN, description="SCHEDULED/DEADLINE/plain")
    is_active: bool = Field(True, description="Whether the timestamp is active")
    start: datetime = Field(..., description="Start of the timestamp")
    end: Optional[datetime] = Field(None, description="End time on the same day")
    interval: Optional[str] = Field(None, description="Repeat interval, kept verbatim")

    @model_validator(mode='after')
    def validate_range(self):
        """Ensure a time range never spans multiple days."""
        if self.end is not None and self.end.date() != self.start.date():
            raise ValueError("End of a timestamp range must be on the same day as its start")
        return self

    def has_time(self) -> bool:
        """Check if the start carries a time of day."""
        return (self.start.hour, self.start.minute, self.start.second) != (0, 0, 0)

    def compare_with(
        self,
        other: 'OrgDateTime',
        exact_compare: Callable[[datetime, datetime], bool] = operator.eq,
        date_only_compare: Callable[[date, date], bool] = operator.eq,
    ) -> bool:
        """
        Compare this timestamp against another one.

        Plans must be equal. Only `other`'s time of day is inspected: when it
        has none, calendar dates are compared with `date_only_compare`,
        otherwise full timestamps are compared with `exact_compare`.
        """
        if self.plan != other.plan:
            return False

        if not other.has_time():
            return date_only_compare(self.start.date(), other.start.date())

        return exact_compare(self.start, other.start)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        data = self.model_dump()
        data['plan'] = self.plan.value
        data['start'] = self.start.isoformat()
        data['end'] = self.end.isoformat() if self.end else None
        return data


class OrgTodo(BaseModel):
    """TODO state of a heading."""

    model_config = ConfigDict(frozen=True)

    keyword: TodoKeyword = Field(..., description="Known keyword or OTHER")
    name: str = Field(..., min_length=1, description="The state word as written")

    @classmethod
    def from_word(cls, word: str) -> 'OrgTodo':
        """Create a TODO state from an all-uppercase word."""
        try:
            keyword = TodoKeyword(word)
        except ValueError:
            keyword = TodoKeyword.OTHER
        return cls(keyword=keyword, name=word)

    def matches(self, state: str) -> bool:
        """Check if this state has the given name."""
        return self.name == state

    def __str__(self) -> str:
        return self.name


class OrgPriority(BaseModel):
    """
    Priority cookie of a heading, written as [#X].

    Ordering: fully alphabetic tokens compare as letters with A being the
    highest, tokens of decimal digits compare as integers, anything else falls
    back to raw string order.
    """

    model_config = ConfigDict(frozen=True)

    value: str = Field(..., min_length=1, description="Raw priority token")

    def _compare(self, other: 'OrgPriority') -> int:
        a, b = self.value, other.value
        if a.isalpha() and b.isalpha():
            # A is higher than B
            a, b = b, a
        elif a.isdecimal() and b.isdecimal():
            return (int(a) > int(b)) - (int(a) < int(b))
        return (a > b) - (a < b)

    def __lt__(self, other: 'OrgPriority') -> bool:
        if not isinstance(other, OrgPriority):
            return NotImplemented
        return self._compare(other) < 0

    def __gt__(self, other: 'OrgPriority') -> bool:
        if not isinstance(other, OrgPriority):
            return NotImplemented
        return self._compare(other) > 0

    def __le__(self, other: 'OrgPriority') -> bool:
        if not isinstance(other, OrgPriority):
            return NotImplemented
        return self._compare(other) <= 0

    def __ge__(self, other: 'OrgPriority') -> bool:
        if not isinstance(other, OrgPriority):
            return NotImplemented
        return self._compare(other) >= 0

    def __str__(self) -> str:
        return self.value


class OrgHeader(BaseModel):
    """
    A heading line of a Markdown or org-mode document.

    Attributes:
        line_number: Line the heading was found on (1-based)
        depth: Count of # (markdown) or * (org) at the beginning of the line
        content: The heading title, stripped from markers, TODO, priority and tags
        tags: Tags found at the end of the heading, in written order
        properties: Key/value pairs of the :PROPERTIES: drawer
        todo: TODO state, if any
        priority: Priority cookie, if any
        datetime: SCHEDULED/DEADLINE timestamp from the following line, if any
    """

    line_number: int = Field(1, ge=1, description="Line number of the heading")
    depth: int = Field(..., ge=1, description="Heading depth")
    content: str = Field("", description="Heading title")
    tags: List[str] = Field(default_factory=list, description="Tags of the heading")
    properties: Dict[str, str] = Field(default_factory=dict, description="Property drawer contents")
    todo: Optional[OrgTodo] = Field(None, description="TODO state")
    priority: Optional[OrgPriority] = Field(None, description="Priority cookie")
    datetime: Optional[OrgDateTime] = Field(None, description="Attached timestamp")

    @model_validator(mode='after')
    def validate_tags(self):
        """Keep tags an ordered set."""
        seen = []
        for tag in self.tags:
            if tag not in seen:
                seen.append(tag)
        self.tags = seen
        return self

    def has_tag(self, tag: str) -> bool:
        """Check if the heading carries a tag."""
        return tag in self.tags

    def has_property(self, key: str, value: str) -> bool:
        """Check if the heading's drawer has `key` set to exactly `value`."""
        return self.properties.get(key) == value

    def to_dict(self) -> Dict[str, Any]:
        """Convert header to dictionary representation."""
        data = self.model_dump()
        data['todo'] = self.todo.name if self.todo else None
        data['priority'] = self.priority.value if self.priority else None
        data['datetime'] = self.datetime.to_dict() if self.datetime else None
        return data

    def __str__(self) -> str:
        """String representation of the header."""
        parts = [f"{'*' * self.depth} {self.content}"]
        if self.todo:
            parts.append(f"Todo: {self.todo}")
        if self.priority:
            parts.append(f"Priority: {self.priority}")
        if self.tags:
            parts.append(f"Tags: {':'.join(self.tags)}")
        return " | ".join(parts)
