"""
Node configuration models.

One explicit model per node type. Field aliases match the property keys of
stored flow definitions (camelCase); string fields may contain ${var}
placeholders and are resolved at execution time, not here.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator

from calendar_nodes.client.calendar import SendUpdates


class ListMode(str, Enum):
    """Which events a list node fetches."""
    UPCOMING = "UPCOMING"
    TIME_RANGE = "TIME_RANGE"
    SEARCH = "SEARCH"
    ALL = "ALL"


class NodeConfig(BaseModel):
    """Base for node configs: unknown keys are rejected."""
    model_config = ConfigDict(extra="forbid", populate_by_name=True, frozen=True)

    result_variable: str = Field(..., alias="resultVariable")

    @field_validator("result_variable")
    @classmethod
    def validate_result_variable(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("resultVariable must not be empty")
        return v


class CreateEventConfig(NodeConfig):
    """Parameters of a create-event node."""

    summary: str = ""
    description: str = ""
    location: str = Field("", alias="eventlocation")
    start_time: str = Field("", alias="startTime")
    end_time: str = Field("", alias="endTime")
    reminders: str = ""
    result_variable: str = Field("eventId", alias="resultVariable")


class UpdateEventConfig(CreateEventConfig):
    """Parameters of an update-event node."""

    event_id: str = Field("", alias="eventId")
    send_updates: SendUpdates = Field(SendUpdates.ALL, alias="sendUpdates")


class ListEventsConfig(NodeConfig):
    """Parameters of a list-events node."""

    list_mode: ListMode = Field(ListMode.UPCOMING, alias="listMode")
    search_query: str = Field("", alias="searchQuery")
    start_time: str = Field("", alias="startTime")
    end_time: str = Field("", alias="endTime")
    max_results: str = Field("10", alias="maxResults")
    result_variable: str = Field("eventList", alias="resultVariable")

    @field_validator("max_results", mode="before")
    @classmethod
    def coerce_max_results(cls, v: object) -> object:
        """Flow files may store the count as a number."""
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v


class DeleteEventConfig(NodeConfig):
    """Parameters of a delete-event node."""

    event_id: str = Field("", alias="eventId")
    send_updates: SendUpdates = Field(SendUpdates.ALL, alias="sendUpdates")
    result_variable: str = Field("deletionResult", alias="resultVariable")


__all__ = [
    "ListMode",
    "NodeConfig",
    "CreateEventConfig",
    "UpdateEventConfig",
    "ListEventsConfig",
    "DeleteEventConfig",
]
