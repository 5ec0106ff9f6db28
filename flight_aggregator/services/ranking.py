import logging
from typing import Iterable

from flight_aggregator.domain.models import CanonicalOffer, RankedResult

logger = logging.getLogger(__name__)


def build_ranking(offers: Iterable[CanonicalOffer]) -> RankedResult:
    """
    Order the same offers cheapest-first and fastest-first.

    Both sorts are stable, so offers with equal keys keep the order they
    were merged in. No offer is dropped from either view. Prices are
    compared as-is; vendors are queried in one currency.

    Args:
        offers: Merged offers from every vendor

    Returns:
        RankedResult: Two full, independently sorted tuples
    """
    offers = tuple(offers)

    currencies = {offer.price.currency for offer in offers}
    if len(currencies) > 1:
        logger.warning(f"Ranking offers in mixed currencies {sorted(currencies)} without conversion")

    return RankedResult(
        cheapest=tuple(sorted(offers, key=lambda offer: offer.price.amount)),
        fastest=tuple(sorted(offers, key=lambda offer: offer.duration_minutes)),
    )
