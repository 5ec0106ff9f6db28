from fastapi import APIRouter, Depends, status
from pydantic import BaseModel
from typing import Dict, List, Optional

from flight_aggregator import __version__
from flight_aggregator.api.dependencies import get_aggregation_service
from flight_aggregator.core.logging import get_logger
from flight_aggregator.services.aggregation_service import FlightAggregationService

# Initialize router and logger
health_router = APIRouter()
logger = get_logger(__name__)


class HealthStatus(BaseModel):
    """Basic health status response model."""
    status: str
    version: str = __version__
    service: str = "Flight Aggregator"


class DependencyStatus(BaseModel):
    """Status of a single dependency."""
    name: str
    status: str
    details: Optional[Dict] = None


class DetailedHealthStatus(HealthStatus):
    """Detailed health status with dependency information."""
    dependencies: List[DependencyStatus]


@health_router.get(
    "",
    response_model=HealthStatus,
    status_code=status.HTTP_200_OK,
    summary="Basic health check",
    description="Returns basic health status of the service."
)
async def get_health() -> HealthStatus:
    """
    Basic health check endpoint.

    Returns:
        HealthStatus: Basic service health status
    """
    logger.debug("Health check requested")
    return HealthStatus(status="ok")


@health_router.get(
    "/detailed",
    response_model=DetailedHealthStatus,
    status_code=status.HTTP_200_OK,
    summary="Detailed health check",
    description="Returns detailed health status including the cache and registered vendors."
)
async def get_detailed_health(
    service: FlightAggregationService = Depends(get_aggregation_service),
) -> DetailedHealthStatus:
    """
    Detailed health check endpoint with dependency status.

    The cache is pinged. Vendors are listed, not called.

    Args:
        service: Aggregation service dependency

    Returns:
        DetailedHealthStatus: Service health with dependency status
    """
    logger.debug("Detailed health check requested")

    cache_ok = await service.cache.ping()
    dependencies = [
        DependencyStatus(
            name="cache",
            status="ok" if cache_ok else "degraded",
            details={"backend": service.cache.level.value}
        ),
    ]
    dependencies.extend(
        DependencyStatus(name=f"vendor:{vendor.name}", status="configured", details=vendor.describe())
        for vendor in service.vendors
    )

    return DetailedHealthStatus(
        status="ok" if cache_ok else "degraded",
        dependencies=dependencies
    )
