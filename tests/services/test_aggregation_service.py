"""
Tests for the flight aggregation service.

Tests cover:
- Ranking the merged offers of every vendor
- Cache hits short-circuiting vendor calls
- REQUIRE_ALL: first failure wins, siblings cancelled, nothing cached
- BEST_EFFORT: partial results, all-vendors-failed error
- Merge order independent of completion order
- Live update loop termination
"""

import asyncio
from unittest.mock import AsyncMock

import pytest

from flight_aggregator.core.config import VendorFailurePolicy
from flight_aggregator.core.exceptions import (
    AllVendorsFailedError,
    VendorError,
    VendorTimeoutError,
    VendorTransportError,
)
from flight_aggregator.core.logging import vendor_name
from flight_aggregator.domain.models import RankedResult
from flight_aggregator.infrastructure.cache import MemoryCache
from flight_aggregator.services.aggregation_service import FlightAggregationService


@pytest.fixture
def cache():
    return MemoryCache()


@pytest.fixture
def scenario_vendors(make_vendor, make_offer):
    return [
        make_vendor("amadeus", [make_offer(duration=600, price="800", airline="A")]),
        make_vendor("flightsky", [make_offer(duration=450, price="950", airline="B")]),
        make_vendor("googleflights", [make_offer(duration=500, price="700", airline="C")]),
    ]


# ============================================================================
# aggregate
# ============================================================================


@pytest.mark.anyio
async def test_ranks_offers_from_every_vendor(scenario_vendors, cache, search_request):
    service = FlightAggregationService(scenario_vendors, cache)

    result = await service.aggregate(search_request)

    assert [o.duration_minutes for o in result.fastest] == [450, 500, 600]
    assert [int(o.price.amount) for o in result.cheapest] == [700, 800, 950]
    assert await cache.get(search_request.cache_key()) == result


@pytest.mark.anyio
async def test_cache_hit_skips_vendors(scenario_vendors, cache, search_request, make_offer):
    cached = RankedResult(cheapest=(make_offer(),), fastest=(make_offer(),))
    await cache.set(search_request.cache_key(), cached)
    service = FlightAggregationService(scenario_vendors, cache)

    result = await service.aggregate(search_request)

    assert result == cached
    assert all(vendor.calls == 0 for vendor in scenario_vendors)


@pytest.mark.anyio
async def test_second_search_is_served_from_cache(scenario_vendors, cache, search_request):
    service = FlightAggregationService(scenario_vendors, cache)

    first = await service.aggregate(search_request)
    second = await service.aggregate(search_request)

    assert first == second
    assert all(vendor.calls == 1 for vendor in scenario_vendors)


@pytest.mark.anyio
async def test_cache_write_failure_still_returns_result(scenario_vendors, search_request, caplog):
    cache = AsyncMock()
    cache.get.return_value = None
    cache.set.return_value = False
    service = FlightAggregationService(scenario_vendors, cache, cache_ttl=15)

    result = await service.aggregate(search_request)

    assert len(result.cheapest) == 3
    cache.set.assert_awaited_once_with(search_request.cache_key(), result, 15)
    assert "Unable to cache" in caplog.text


@pytest.mark.anyio
async def test_merge_order_is_registration_order(make_vendor, make_offer, cache, search_request):
    slow = make_vendor("slow", [make_offer(price="100", airline="Slow")], delay=0.05)
    fast = make_vendor("fast", [make_offer(price="100", airline="Fast")])
    service = FlightAggregationService([slow, fast], cache)

    result = await service.aggregate(search_request)

    assert [o.airline_name for o in result.cheapest] == ["Slow", "Fast"]


@pytest.mark.anyio
async def test_vendor_name_bound_per_task(scenario_vendors, cache, search_request):
    service = FlightAggregationService(scenario_vendors, cache)

    await service.aggregate(search_request)

    assert [v.seen_vendor_context for v in scenario_vendors] == ["amadeus", "flightsky", "googleflights"]
    assert vendor_name.get() == ""


@pytest.mark.anyio
async def test_no_vendors(cache, search_request):
    result = await FlightAggregationService([], cache).aggregate(search_request)

    assert result == RankedResult()


# ============================================================================
# REQUIRE_ALL
# ============================================================================


@pytest.mark.anyio
async def test_require_all_fails_on_any_vendor_error(make_vendor, make_offer, cache, search_request):
    error = VendorTransportError("flightsky", "invalid status code", upstream_status=500)
    vendors = [
        make_vendor("amadeus", [make_offer()]),
        make_vendor("flightsky", error=error),
    ]
    service = FlightAggregationService(vendors, cache)

    with pytest.raises(VendorTransportError) as exc_info:
        await service.aggregate(search_request)

    assert exc_info.value is error
    assert await cache.get(search_request.cache_key()) is None


@pytest.mark.anyio
async def test_require_all_cancels_pending_vendors(make_vendor, make_offer, cache, search_request):
    slow = make_vendor("slow", [make_offer()], delay=10)
    failing = make_vendor("failing", error=VendorTimeoutError("failing", 60))
    service = FlightAggregationService([slow, failing], cache)

    with pytest.raises(VendorTimeoutError):
        await asyncio.wait_for(service.aggregate(search_request), timeout=2)

    assert slow.cancelled


@pytest.mark.anyio
async def test_require_all_reports_first_failure_in_registration_order(make_vendor, cache, search_request):
    first = VendorTransportError("a", "down")
    second = VendorTransportError("b", "down")
    service = FlightAggregationService(
        [make_vendor("a", error=first), make_vendor("b", error=second)], cache
    )

    with pytest.raises(VendorTransportError) as exc_info:
        await service.aggregate(search_request)

    assert exc_info.value is first


@pytest.mark.anyio
async def test_unexpected_error_is_wrapped(make_vendor, cache, search_request):
    service = FlightAggregationService([make_vendor("broken", error=RuntimeError("boom"))], cache)

    with pytest.raises(VendorError) as exc_info:
        await service.aggregate(search_request)

    assert exc_info.value.vendor == "broken"
    assert "boom" in exc_info.value.detail
    assert isinstance(exc_info.value.original_exception, RuntimeError)


# ============================================================================
# BEST_EFFORT
# ============================================================================


@pytest.mark.anyio
async def test_best_effort_ranks_healthy_vendors(make_vendor, make_offer, cache, search_request):
    vendors = [
        make_vendor("amadeus", [make_offer(price="800")]),
        make_vendor("flightsky", error=VendorTransportError("flightsky", "down")),
        make_vendor("googleflights", [make_offer(price="700")]),
    ]
    service = FlightAggregationService(vendors, cache, policy=VendorFailurePolicy.BEST_EFFORT)

    result = await service.aggregate(search_request)

    assert [int(o.price.amount) for o in result.cheapest] == [700, 800]
    assert await cache.get(search_request.cache_key()) is None


@pytest.mark.anyio
async def test_best_effort_all_vendors_failed(make_vendor, cache, search_request):
    vendors = [
        make_vendor("amadeus", error=VendorTransportError("amadeus", "down")),
        make_vendor("flightsky", error=VendorTimeoutError("flightsky", 60)),
    ]
    service = FlightAggregationService(vendors, cache, policy=VendorFailurePolicy.BEST_EFFORT)

    with pytest.raises(AllVendorsFailedError) as exc_info:
        await service.aggregate(search_request)

    assert set(exc_info.value.context["vendors"]) == {"amadeus", "flightsky"}
    assert exc_info.value.status_code == 502
    assert await cache.get(search_request.cache_key()) is None


@pytest.mark.anyio
async def test_best_effort_empty_vendor_is_not_a_failure(make_vendor, cache, search_request):
    vendors = [
        make_vendor("amadeus", []),
        make_vendor("flightsky", error=VendorTransportError("flightsky", "down")),
    ]
    service = FlightAggregationService(vendors, cache, policy=VendorFailurePolicy.BEST_EFFORT)

    result = await service.aggregate(search_request)

    assert result == RankedResult()


@pytest.mark.anyio
async def test_best_effort_caches_once_every_vendor_answers(make_vendor, make_offer, cache, search_request):
    flaky = make_vendor("flightsky", error=VendorTransportError("flightsky", "down"))
    vendors = [make_vendor("amadeus", [make_offer(price="800")]), flaky]
    service = FlightAggregationService(vendors, cache, policy=VendorFailurePolicy.BEST_EFFORT)

    await service.aggregate(search_request)
    flaky.error = None
    flaky.offers = [make_offer(price="600")]
    result = await service.aggregate(search_request)

    assert [int(o.price.amount) for o in result.cheapest] == [600, 800]
    assert flaky.calls == 2
    assert await cache.get(search_request.cache_key()) == result


# ============================================================================
# watch
# ============================================================================


@pytest.mark.anyio
async def test_watch_pushes_until_receiver_is_gone(scenario_vendors, cache, search_request):
    send = AsyncMock(side_effect=[None, None, ConnectionError("closed")])
    service = FlightAggregationService(scenario_vendors, cache)

    await asyncio.wait_for(service.watch(search_request, send, interval=0), timeout=2)

    assert send.await_count == 3
    payload = send.await_args_list[0].args[0]
    assert [o["durationMinutes"] for o in payload["fastest"]] == [450, 500, 600]
    assert payload["cheapest"][0]["price"] == {"amount": "700", "currency": "USD"}


@pytest.mark.anyio
async def test_watch_sends_error_and_stops(make_vendor, cache, search_request):
    send = AsyncMock()
    vendors = [make_vendor("flightsky", error=VendorTransportError("flightsky", "down", upstream_status=503))]
    service = FlightAggregationService(vendors, cache)

    await asyncio.wait_for(service.watch(search_request, send, interval=0), timeout=2)

    send.assert_awaited_once()
    error = send.await_args.args[0]["error"]
    assert error["code"] == "vendor_transport_error"
    assert error["context"]["upstream_status"] == 503


@pytest.mark.anyio
async def test_watch_error_context_is_redacted(make_vendor, cache, search_request):
    send = AsyncMock()
    error = VendorError("amadeus", "rejected", context={"client_secret": "s3cret", "request": {"api_key": "k3y"}})
    service = FlightAggregationService([make_vendor("amadeus", error=error)], cache)

    await service.watch(search_request, send, interval=0)

    context = send.await_args.args[0]["error"]["context"]
    assert context["client_secret"] == "[REDACTED]"
    assert context["request"] == {"api_key": "[REDACTED]"}
    assert error.context["client_secret"] == "s3cret"


@pytest.mark.anyio
async def test_watch_hides_unexpected_errors(cache, search_request):
    send = AsyncMock()
    service = FlightAggregationService([], cache)
    service.aggregate = AsyncMock(side_effect=RuntimeError("secret detail"))

    await service.watch(search_request, send, interval=0)

    assert send.await_args.args[0] == {
        "error": {"code": "internal_error", "message": "An unexpected error occurred"}
    }


@pytest.mark.anyio
async def test_watch_uses_default_interval(scenario_vendors, cache, search_request, monkeypatch):
    sleeps = []

    async def fake_sleep(seconds):
        sleeps.append(seconds)

    monkeypatch.setattr("flight_aggregator.services.aggregation_service.asyncio.sleep", fake_sleep)
    send = AsyncMock(side_effect=[None, ConnectionError("closed")])
    service = FlightAggregationService(scenario_vendors, cache, live_update_interval=12.5)

    await service.watch(search_request, send)

    assert sleeps == [12.5]
