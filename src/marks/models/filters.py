"""
Structural filter criteria for Marks.

FilterCriteria is built once per run from the invocation options and only read
by the per-file searchers.
"""

from typing import Dict, List, Optional, Any
from enum import Enum
from pydantic import BaseModel, ConfigDict, Field, field_validator

from .org import OrgDateTime, OrgPriority


class FilterKind(Enum):
    """The closed set of structural predicates a heading can be checked against."""
    TAGS = "tags"
    PROPERTIES = "properties"
    TODO = "todo"
    PRIORITY = "priority"
    PRIORITY_BELOW = "priority_lt"
    PRIORITY_ABOVE = "priority_gt"
    SCHEDULE = "schedule"


class FilterCriteria(BaseModel):
    """
    Structural filters requested for a search run.

    Attributes:
        tagged: Tags that must appear on some ancestor heading
        properties: Key/value pairs that must appear on some ancestor heading
        todo: Accepted TODO states of the innermost heading
        priority: Accepted priorities of the innermost heading
        priority_lt: Innermost heading priority must be strictly lower
        priority_gt: Innermost heading priority must be strictly higher
        schedule: Timestamp the innermost heading's SCHEDULED/DEADLINE must match
    """

    model_config = ConfigDict(frozen=True)

    tagged: List[str] = Field(default_factory=list, description="Required tags")
    properties: Dict[str, str] = Field(default_factory=dict, description="Required properties")
    todo: List[str] = Field(default_factory=list, description="Accepted TODO states")
    priority: List[OrgPriority] = Field(default_factory=list, description="Accepted priorities")
    priority_lt: Optional[OrgPriority] = Field(None, description="Priority upper bound")
    priority_gt: Optional[OrgPriority] = Field(None, description="Priority lower bound")
    schedule: Optional[OrgDateTime] = Field(None, description="Required schedule")

    @field_validator('priority', mode='before')
    @classmethod
    def validate_priority(cls, v) -> List[Any]:
        """Accept raw priority tokens."""
        if not isinstance(v, list):
            v = [v]
        return [OrgPriority(value=p) if isinstance(p, str) else p for p in v]

    @field_validator('priority_lt', 'priority_gt', mode='before')
    @classmethod
    def validate_priority_bound(cls, v) -> Any:
        """Accept a raw priority token as a bound."""
        if isinstance(v, str):
            return OrgPriority(value=v)
        return v

    @field_validator('todo')
    @classmethod
    def validate_todo(cls, v: List[str]) -> List[str]:
        """TODO states are uppercase words."""
        for state in v:
            if not state or not state.isupper():
                raise ValueError(f"Invalid TODO state: {state!r}")
        return v

    def active_filters(self) -> List[FilterKind]:
        """Get the filter kinds that are configured, in evaluation order."""
        active = []
        if self.tagged:
            active.append(FilterKind.TAGS)
        if self.properties:
            active.append(FilterKind.PROPERTIES)
        if self.todo:
            active.append(FilterKind.TODO)
        if self.priority:
            active.append(FilterKind.PRIORITY)
        if self.priority_lt is not None:
            active.append(FilterKind.PRIORITY_BELOW)
        if self.priority_gt is not None:
            active.append(FilterKind.PRIORITY_ABOVE)
        if self.schedule is not None:
            active.append(FilterKind.SCHEDULE)
        return active

    def to_dict(self) -> Dict[str, Any]:
        """Convert criteria to dictionary representation."""
        return {
            'tagged': list(self.tagged),
            'properties': dict(self.properties),
            'todo': list(self.todo),
            'priority': [p.value for p in self.priority],
            'priority_lt': self.priority_lt.value if self.priority_lt else None,
            'priority_gt': self.priority_gt.value if self.priority_gt else None,
            'schedule': self.schedule.to_dict() if self.schedule else None,
        }

    def __str__(self) -> str:
        """String representation of the criteria."""
        active = self.active_filters()
        if not active:
            return "No structural filters"
        return "Filters: " + ", ".join(kind.value for kind in active)
