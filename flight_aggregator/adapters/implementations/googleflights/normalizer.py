from typing import List

from flight_aggregator.adapters.implementations.googleflights.client import VENDOR_NAME
from flight_aggregator.adapters.implementations.googleflights.models import GoogleFlightsResponse
from flight_aggregator.adapters.interfaces.normalizer import NormalizationContext, OfferNormalizer
from flight_aggregator.domain.models import CanonicalOffer


class GoogleFlightsNormalizer(OfferNormalizer[GoogleFlightsResponse]):
    """Maps Google Flights top and other itineraries to canonical offers."""

    vendor_name = VENDOR_NAME

    def normalize(self, raw: GoogleFlightsResponse, ctx: NormalizationContext) -> List[CanonicalOffer]:
        results: List[CanonicalOffer] = []
        if raw.data is None or raw.data.itineraries is None:
            return results

        for itinerary in raw.data.itineraries.all():
            flights = itinerary.flights or []
            if not flights:
                self.skip("itinerary without flights")
                continue

            first, last = flights[0], flights[-1]
            departure, arrival = first.departure_airport, last.arrival_airport
            if departure is None or arrival is None or departure.time is None or arrival.time is None:
                self.skip("missing departure or arrival time")
                continue
            if not departure.airport_code or not arrival.airport_code:
                self.skip("missing airport code")
                continue
            if itinerary.price is None:
                self.skip("missing price")
                continue

            if itinerary.layovers is not None:
                stop_count = len(itinerary.layovers)
            else:
                stop_count = len(flights) - 1

            duration = itinerary.duration.raw if itinerary.duration else None

            mapped = self.build_offer(
                airline_name=first.airline or "",
                flight_number=first.flight_number or "",
                departure_code=departure.airport_code,
                departure_time=departure.time,
                arrival_code=arrival.airport_code,
                arrival_time=arrival.time,
                duration_minutes=duration,
                stop_count=stop_count,
                price=itinerary.price,
                ctx=ctx,
            )
            if mapped is not None:
                results.append(mapped)

        return results
