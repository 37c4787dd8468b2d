"""Response cache repositories.

The response cache stores raw feed responses keyed by request so that a
refresh can reuse a recent snapshot instead of hitting the network. Storage
failures are logged and reported as None/False, never raised.
"""

import logging
from abc import ABC, abstractmethod

from botocore.exceptions import ClientError
from mypy_boto3_dynamodb.service_resource import DynamoDBServiceResource, Table

from dining_catalog_service.models.cache_models import CachedResponse

logger = logging.getLogger(__name__)


class ResponseCacheRepository(ABC):
    """Abstract store of cached responses keyed by request."""

    @abstractmethod
    def get_response(self, request_key: str) -> CachedResponse | None:
        """Retrieve the cached response for a request.

        Args:
            request_key: Identity of the request

        Returns:
            CachedResponse if found, None otherwise
        """
        pass

    @abstractmethod
    def save_response(self, response: CachedResponse) -> bool:
        """Save or replace the cached response for its request.

        Args:
            response: CachedResponse to save

        Returns:
            bool: True if save succeeded, False otherwise
        """
        pass

    @abstractmethod
    def delete_response(self, request_key: str) -> bool:
        """Delete the cached response for a request.

        Args:
            request_key: Identity of the request

        Returns:
            bool: True if delete succeeded, False otherwise
        """
        pass


class InMemoryResponseCacheRepository(ResponseCacheRepository):
    """Process-local response cache, used for local runs and tests."""

    def __init__(self) -> None:
        self._responses: dict[str, CachedResponse] = {}

    def get_response(self, request_key: str) -> CachedResponse | None:
        return self._responses.get(request_key)

    def save_response(self, response: CachedResponse) -> bool:
        self._responses[response.request_key] = response
        return True

    def delete_response(self, request_key: str) -> bool:
        self._responses.pop(request_key, None)
        return True


class DynamoDBResponseCacheRepository(ResponseCacheRepository):
    """Response cache stored in DynamoDB.

    Items use ``request_key`` as partition key, which lets warm and cold
    Lambda containers share one snapshot.
    """

    def __init__(self, dynamodb_resource: DynamoDBServiceResource, table_name: str) -> None:
        """Initialize repository.

        Args:
            dynamodb_resource: Boto3 DynamoDB resource
            table_name: Name of the DynamoDB table
        """
        self.dynamodb = dynamodb_resource
        self.table_name = table_name
        self.table: Table = dynamodb_resource.Table(table_name)

    def get_response(self, request_key: str) -> CachedResponse | None:
        try:
            response = self.table.get_item(Key={"request_key": request_key})

            if "Item" not in response:
                return None

            return CachedResponse.from_dynamodb_item(response["Item"])

        except ClientError as e:
            logger.error(f"Failed to get cached response: {e}")  # pragma: no cover
            return None

    def save_response(self, response: CachedResponse) -> bool:
        try:
            self.table.put_item(Item=response.to_dynamodb_item())
            return True

        except ClientError as e:
            logger.error(f"Failed to save cached response: {e}")  # pragma: no cover
            return False

    def delete_response(self, request_key: str) -> bool:
        try:
            self.table.delete_item(Key={"request_key": request_key})
            return True

        except ClientError as e:
            logger.error(f"Failed to delete cached response: {e}")  # pragma: no cover
            return False
