"""Serving event model.

An event is one contiguous serving window at an eatery (e.g. "Lunch" from
11:00 to 14:30) together with the menu served during it.
"""

from datetime import datetime

from pydantic import BaseModel, Field, model_validator

from dining_catalog_service.models.menu_models import Menu, menu_is_empty


class Event(BaseModel):
    """Serving window with its menu.

    Start and end are timezone-aware instants. They are only extended while
    the owning eatery merges adjacent hour records; afterwards events are
    treated as read-only.
    """

    description: str = Field(..., description="Event name, unique per day within an eatery")
    summary: str = Field(default="", description="Calendar summary from the feed")
    start: datetime = Field(..., description="Start of the serving window")
    end: datetime = Field(..., description="End of the serving window")
    menu: Menu = Field(default_factory=dict, description="Menu served during the event")

    @model_validator(mode="after")
    def validate_bounds(self) -> "Event":
        """Validate that the window does not end before it starts."""
        if self.end < self.start:
            raise ValueError("event end must not be earlier than its start")
        return self

    @property
    def has_menu(self) -> bool:
        """Whether the event carries at least one menu item."""
        return not menu_is_empty(self.menu)

    def occurring_on(self, instant: datetime) -> bool:
        """Tell whether the event is running at an instant.

        Args:
            instant: Timezone-aware instant to test

        Returns:
            True if ``start <= instant <= end``
        """
        return self.start <= instant <= self.end

    def is_mergeable_with(self, other: "Event") -> bool:
        """Tell whether another event continues this one.

        Two events are mergeable when they share a description and one ends
        exactly where the other starts.
        """
        if self.description != other.description:
            return False
        return self.end == other.start or self.start == other.end
