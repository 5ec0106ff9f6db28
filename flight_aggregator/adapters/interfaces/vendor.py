from abc import abstractmethod
from typing import Any, Dict, Generic, List, Type, TypeVar
import logging

from pydantic import BaseModel, ConfigDict, ValidationError

from flight_aggregator.adapters.interfaces.connector import APIConnector
from flight_aggregator.adapters.interfaces.normalizer import NormalizationContext, OfferNormalizer
from flight_aggregator.core.exceptions import VendorDecodeError
from flight_aggregator.domain.models import CanonicalOffer, SearchRequest

# Generic type for a vendor's raw response model
R = TypeVar('R')
M = TypeVar('M', bound=BaseModel)

logger = logging.getLogger(__name__)


class RawVendorModel(BaseModel):
    """
    Base for raw vendor payload models.

    Unknown fields are ignored. Fields a normalizer needs are optional so a
    missing one marks the itinerary malformed instead of failing the decode.
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class VendorClient(APIConnector, Generic[R]):
    """
    Abstract base for flight vendor clients.

    A client performs authenticated retrieval of raw offers for one search
    request and knows which normalization context its raw result needs.

    Type Parameters:
        R: The vendor's raw response model
    """

    @abstractmethod
    async def fetch(self, request: SearchRequest) -> R:
        """
        Retrieves raw offers for a search request.

        Args:
            request: Validated search criteria

        Returns:
            R: The decoded vendor response

        Raises:
            VendorTransportError: On network failure or non-success status
            VendorDecodeError: If the response does not have the expected shape
        """

    def context_for(self, raw: R) -> NormalizationContext:
        """
        Builds the normalization context for a raw result.

        Vendors that resolve extra data during fetch override this.
        """
        return NormalizationContext()

    def decode(self, model: Type[M], payload: Any) -> M:
        """
        Validates a JSON payload into a raw response model.

        Raises:
            VendorDecodeError: If validation fails
        """
        try:
            return model.model_validate(payload if payload is not None else {})
        except ValidationError as e:
            logger.error(f"{self.vendor_name}: unable to decode {model.__name__}: {str(e)}")
            raise VendorDecodeError(
                self.vendor_name, f"unable to decode {model.__name__}", original_exception=e
            )


class FlightVendor(Generic[R]):
    """
    A vendor pipeline: one client paired with its normalizer.

    This is the unit of work the aggregation service fans out to.
    """

    def __init__(self, client: VendorClient[R], normalizer: OfferNormalizer[R]):
        self.client = client
        self.normalizer = normalizer

    @property
    def name(self) -> str:
        return self.client.vendor_name

    async def fetch_and_normalize(self, request: SearchRequest) -> List[CanonicalOffer]:
        """
        Fetches raw offers and maps them to canonical offers.

        Args:
            request: Validated search criteria

        Returns:
            List[CanonicalOffer]: This vendor's offers

        Raises:
            VendorError: If retrieval or normalization fails
        """
        raw = await self.client.fetch(request)
        offers = self.normalizer.normalize(raw, self.client.context_for(raw))
        logger.info(f"found {len(offers)} offers with {self.name}")
        return offers

    def describe(self) -> Dict[str, Any]:
        """Summary used by the detailed health check."""
        return {
            "name": self.name,
            "base_url": self.client.base_url,
            "auth_type": self.client.auth_type.value,
            "timeout": self.client.config.timeout,
        }
