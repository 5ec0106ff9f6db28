import asyncio
import logging
from typing import Any, Awaitable, Callable, Dict, List, Optional, Sequence, Tuple

from flight_aggregator.adapters.interfaces.cache import ResponseCache
from flight_aggregator.adapters.interfaces.vendor import FlightVendor
from flight_aggregator.core.config import VendorFailurePolicy
from flight_aggregator.core.exceptions import AllVendorsFailedError, APIException, VendorError, redact
from flight_aggregator.core.logging import set_vendor
from flight_aggregator.domain.models import CanonicalOffer, RankedResult, SearchRequest
from flight_aggregator.services.ranking import build_ranking

logger = logging.getLogger(__name__)

SendFunc = Callable[[Dict[str, Any]], Awaitable[None]]


class FlightAggregationService:
    """
    Finds the best offers for a search across every vendor.

    Reads the cache first. On a miss, runs every vendor pipeline as its own
    task and applies the failure policy. The merged offers are ranked, and
    the ranking is cached only when every vendor answered.
    """

    def __init__(
        self,
        vendors: Sequence[FlightVendor],
        cache: ResponseCache,
        policy: VendorFailurePolicy = VendorFailurePolicy.REQUIRE_ALL,
        cache_ttl: int = 30,
        live_update_interval: float = 30.0,
    ):
        """
        Initialize the service.

        Args:
            vendors: Vendor pipelines, in merge order
            cache: Response cache
            policy: Reaction to a failing vendor
            cache_ttl: Seconds a ranking stays cached
            live_update_interval: Default seconds between live updates
        """
        self.vendors = list(vendors)
        self.cache = cache
        self.policy = policy
        self.cache_ttl = cache_ttl
        self.live_update_interval = live_update_interval

    @property
    def vendor_names(self) -> List[str]:
        return [vendor.name for vendor in self.vendors]

    async def aggregate(self, request: SearchRequest) -> RankedResult:
        """
        Gets the ranked offers for a search.

        Args:
            request: Validated search criteria

        Returns:
            RankedResult: Cheapest-first and fastest-first views

        Raises:
            VendorError: Under REQUIRE_ALL, the first vendor failure
            AllVendorsFailedError: Under BEST_EFFORT, when every vendor failed
        """
        key = request.cache_key()

        cached = await self.cache.get(key)
        if cached is not None:
            logger.info(f"Serving cached offers for {key}")
            return cached

        logger.info(f"Searching {len(self.vendors)} vendors for {key} with policy {self.policy.value}")
        offers, complete = await self._collect(request)
        result = build_ranking(offers)

        if not complete:
            logger.info(f"Not caching partial offers for {key}")
        elif not await self.cache.set(key, result, self.cache_ttl):
            logger.warning(f"Unable to cache offers for {key}")

        logger.info(f"Ranked {len(offers)} offers for {key}")
        return result

    async def _run_vendor(self, vendor: FlightVendor, request: SearchRequest) -> List[CanonicalOffer]:
        set_vendor(vendor.name)
        try:
            return await vendor.fetch_and_normalize(request)
        except VendorError as e:
            logger.error(f"Vendor {vendor.name} failed: {e.detail}")
            raise
        except Exception as e:
            logger.exception(f"Unexpected error from vendor {vendor.name}")
            raise VendorError(vendor.name, f"unexpected error: {str(e)}", original_exception=e)

    async def _collect(self, request: SearchRequest) -> Tuple[List[CanonicalOffer], bool]:
        """Merged offers, and whether every vendor contributed."""
        if not self.vendors:
            return [], True

        tasks = [
            asyncio.create_task(self._run_vendor(vendor, request), name=f"vendor:{vendor.name}")
            for vendor in self.vendors
        ]

        if self.policy == VendorFailurePolicy.BEST_EFFORT:
            results, complete = await self._best_effort(tasks)
        else:
            results, complete = await self._require_all(tasks), True

        # Registration order, whatever the completion order was
        return [offer for offers in results for offer in offers], complete

    async def _require_all(self, tasks: List["asyncio.Task[List[CanonicalOffer]]"]) -> List[List[CanonicalOffer]]:
        try:
            done, pending = await asyncio.wait(tasks, return_when=asyncio.FIRST_EXCEPTION)
        except asyncio.CancelledError:
            await self._cancel(tasks)
            raise

        failed = [
            task for task in tasks
            if task in done and not task.cancelled() and task.exception() is not None
        ]
        if failed:
            await self._cancel(pending)
            raise failed[0].exception()

        return [task.result() for task in tasks]

    async def _best_effort(
        self, tasks: List["asyncio.Task[List[CanonicalOffer]]"]
    ) -> Tuple[List[List[CanonicalOffer]], bool]:
        outcomes = await asyncio.gather(*tasks, return_exceptions=True)

        results: List[List[CanonicalOffer]] = []
        errors: List[VendorError] = []
        for vendor, outcome in zip(self.vendors, outcomes):
            if isinstance(outcome, VendorError):
                logger.warning(f"Skipping vendor {vendor.name}: {outcome.detail}")
                errors.append(outcome)
            elif isinstance(outcome, BaseException):
                raise outcome
            else:
                results.append(outcome)

        if errors and not results:
            raise AllVendorsFailedError(errors)
        return results, not errors

    @staticmethod
    async def _cancel(tasks) -> None:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)

    async def watch(
        self,
        request: SearchRequest,
        send: SendFunc,
        interval: Optional[float] = None,
    ) -> None:
        """
        Pushes a fresh ranking through ``send`` every ``interval`` seconds.

        Returns when ``send`` fails, which means the receiver is gone. A
        failed search is pushed as an ``{"error": ...}`` payload and ends
        the loop.

        Args:
            request: Validated search criteria
            send: Coroutine delivering one JSON-ready payload
            interval: Seconds between pushes, defaults to the service setting
        """
        interval = interval if interval is not None else self.live_update_interval

        while True:
            try:
                result = await self.aggregate(request)
            except Exception as e:
                logger.error(f"Live update search failed: {str(e)}")
                await self._send_quietly(send, {"error": self._error_payload(e)})
                return

            if not await self._send_quietly(send, result.model_dump(mode="json", by_alias=True)):
                return

            await asyncio.sleep(interval)

    @staticmethod
    async def _send_quietly(send: SendFunc, payload: Dict[str, Any]) -> bool:
        try:
            await send(payload)
        except Exception as e:
            logger.info(f"Live update receiver closed: {str(e)}")
            return False
        return True

    @staticmethod
    def _error_payload(error: Exception) -> Dict[str, Any]:
        if isinstance(error, APIException):
            payload = error.to_dict()["error"]
            payload["context"] = redact(error.context)
            return payload
        return {"code": "internal_error", "message": "An unexpected error occurred"}
