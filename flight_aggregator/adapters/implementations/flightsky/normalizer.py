from typing import List

from flight_aggregator.adapters.implementations.flightsky.client import VENDOR_NAME
from flight_aggregator.adapters.implementations.flightsky.models import FlightSkyResponse
from flight_aggregator.adapters.interfaces.normalizer import NormalizationContext, OfferNormalizer
from flight_aggregator.domain.models import CanonicalOffer


class FlightSkyNormalizer(OfferNormalizer[FlightSkyResponse]):
    """
    Maps Flights Sky itineraries to canonical offers.

    A one-way itinerary has a single leg; its segments are the flights.
    """

    vendor_name = VENDOR_NAME

    def normalize(self, raw: FlightSkyResponse, ctx: NormalizationContext) -> List[CanonicalOffer]:
        results: List[CanonicalOffer] = []
        itineraries = raw.data.itineraries if raw.data else None

        for itinerary in itineraries or []:
            if not itinerary.legs:
                self.skip("itinerary without legs")
                continue

            leg = itinerary.legs[0]
            segments = leg.segments or []
            if not segments:
                self.skip("leg without segments")
                continue

            first, last = segments[0], segments[-1]
            departure_time = first.departure or leg.departure
            arrival_time = last.arrival or leg.arrival
            if departure_time is None or arrival_time is None:
                self.skip("missing departure or arrival time")
                continue

            departure_code = first.origin.code if first.origin else None
            arrival_code = last.destination.code if last.destination else None
            if not departure_code or not arrival_code:
                self.skip("missing airport code")
                continue

            if itinerary.price is None or itinerary.price.raw is None:
                self.skip("missing price")
                continue

            carrier = first.marketing_carrier
            stop_count = leg.stop_count if leg.stop_count is not None else len(segments) - 1

            mapped = self.build_offer(
                airline_name=carrier.name if carrier else "",
                flight_number=first.flight_number or "",
                departure_code=departure_code,
                departure_time=departure_time,
                arrival_code=arrival_code,
                arrival_time=arrival_time,
                duration_minutes=leg.duration_in_minutes,
                stop_count=stop_count,
                price=itinerary.price.raw,
                ctx=ctx,
            )
            if mapped is not None:
                results.append(mapped)

        return results
