from typing import List

from flight_aggregator.adapters.implementations.amadeus.client import VENDOR_NAME
from flight_aggregator.adapters.implementations.amadeus.models import AmadeusSearchResult
from flight_aggregator.adapters.interfaces.normalizer import (
    NormalizationContext,
    OfferNormalizer,
    parse_iso_duration_minutes,
)
from flight_aggregator.domain.models import CanonicalOffer


class AmadeusNormalizer(OfferNormalizer[AmadeusSearchResult]):
    """
    Maps Amadeus flight offers to canonical offers.

    Every itinerary of every offer becomes one canonical offer. Its legs are
    the itinerary segments; the airline is the offer's first validating
    carrier, resolved through the context.
    """

    vendor_name = VENDOR_NAME

    def normalize(self, raw: AmadeusSearchResult, ctx: NormalizationContext) -> List[CanonicalOffer]:
        results: List[CanonicalOffer] = []

        for offer in raw.offers:
            for itinerary in offer.itineraries or []:
                segments = itinerary.segments or []
                if not segments:
                    self.skip("itinerary without segments")
                    continue

                first, last = segments[0], segments[-1]
                departure, arrival = first.departure, last.arrival
                if departure is None or arrival is None or departure.at is None or arrival.at is None:
                    self.skip("missing departure or arrival time")
                    continue
                if not departure.iata_code or not arrival.iata_code:
                    self.skip("missing airport code")
                    continue
                if offer.price is None or offer.price.total is None:
                    self.skip("missing price")
                    continue

                codes = offer.validating_airline_codes or []
                carrier = codes[0] if codes else first.carrier_code

                mapped = self.build_offer(
                    airline_name=ctx.airline_name(carrier),
                    flight_number=f"{first.carrier_code or ''}{first.number or ''}",
                    departure_code=departure.iata_code,
                    departure_time=departure.at,
                    arrival_code=arrival.iata_code,
                    arrival_time=arrival.at,
                    duration_minutes=parse_iso_duration_minutes(itinerary.duration),
                    stop_count=len(segments) - 1,
                    price=offer.price.total,
                    ctx=ctx,
                )
                if mapped is not None:
                    results.append(mapped)

        return results
