"""Cached feed response model."""

from datetime import datetime, timedelta
from typing import Any

from pydantic import BaseModel, Field

FRESHNESS_WINDOW = timedelta(hours=24)


class CachedResponse(BaseModel):
    """Raw response body stored with the time it was fetched.

    Stored in DynamoDB with ``request_key`` as partition key.
    """

    request_key: str = Field(..., description="Identity of the request, e.g. 'GET https://...'")
    body: bytes = Field(..., description="Raw response body")
    fetched_at: datetime = Field(..., description="When the response was received")

    def age(self, now: datetime) -> timedelta:
        """Time elapsed since the response was fetched."""
        return now - self.fetched_at

    def is_fresh(self, now: datetime, max_age: timedelta = FRESHNESS_WINDOW) -> bool:
        """Whether the response is at most ``max_age`` old."""
        return self.age(now) <= max_age

    def to_dynamodb_item(self) -> dict[str, Any]:
        """Convert to DynamoDB item format.

        Returns:
            dict: DynamoDB-compatible representation
        """
        return {
            "request_key": self.request_key,
            "body": self.body,
            "fetched_at": self.fetched_at.isoformat(),
        }

    @classmethod
    def from_dynamodb_item(cls, item: dict[str, Any]) -> "CachedResponse":
        """Create CachedResponse from DynamoDB item.

        Binary attributes come back from boto3 wrapped in ``Binary``.

        Args:
            item: DynamoDB item dictionary

        Returns:
            CachedResponse: Parsed model instance
        """
        body = item["body"]
        if not isinstance(body, bytes):
            body = bytes(body.value) if hasattr(body, "value") else bytes(body)

        return cls(
            request_key=item["request_key"],
            body=body,
            fetched_at=datetime.fromisoformat(item["fetched_at"]),
        )
