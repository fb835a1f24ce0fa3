import math
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.config import settings


class SearchRequest(BaseModel):
    """Simplified search accepted from the caller (camelCase JSON keys only).

    Values are relayed as given; Amadeus is the one that rejects bad codes or dates.
    """

    model_config = ConfigDict(extra="ignore")

    origin: Any = Field(None, alias="originLocationCode")
    destination: Any = Field(None, alias="destinationLocationCode")
    departure_date: Any = Field(None, alias="departureDate", description="YYYY-MM-DD")
    return_date: Any = Field(None, alias="returnDate")
    adults: int = 1
    currency: Any = Field(default_factory=lambda: settings.DEFAULT_CURRENCY, alias="currencyCode")
    max_offers: Optional[int] = Field(None, alias="max")
    non_stop: Optional[bool] = Field(None, alias="nonStop")
    travel_class: Any = Field(None, alias="travelClass")  # ECONOMY, PREMIUM_ECONOMY, BUSINESS, FIRST

    @field_validator("return_date", "travel_class", mode="before")
    @classmethod
    def _blank_to_none(cls, v: Any) -> Any:
        return v or None

    @field_validator("currency", mode="before")
    @classmethod
    def _default_currency(cls, v: Any) -> Any:
        return settings.DEFAULT_CURRENCY if v is None else v

    @field_validator("adults", mode="before")
    @classmethod
    def _traveler_count(cls, v: Any) -> int:
        # null, negatives and non-numbers mean no travelers
        if v is None or isinstance(v, bool):
            return int(bool(v))
        if isinstance(v, int):
            return max(0, v)
        try:
            n = float(v)
        except (TypeError, ValueError):
            return 0
        if math.isnan(n):
            return 0
        if math.isinf(n):
            raise ValueError("adults must be a finite number")
        return max(0, int(n))

    @field_validator("max_offers", mode="before")
    @classmethod
    def _lenient_max(cls, v: Any) -> Optional[int]:
        # Anything that is not a usable number falls back to the default cap
        if isinstance(v, bool):
            return None
        if isinstance(v, int):
            n = v
        else:
            try:
                f = float(v)
            except (TypeError, ValueError):
                return None
            if math.isnan(f):
                return None
            if math.isinf(f):
                return settings.MAX_OFFERS_CAP if f > 0 else None
            n = int(f)
        return min(n, settings.MAX_OFFERS_CAP) or None

    @field_validator("non_stop", mode="before")
    @classmethod
    def _only_real_booleans(cls, v: Any) -> Optional[bool]:
        return v if isinstance(v, bool) else None


class DateTimeRange(BaseModel):
    date: Any = None


class OriginDestination(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    origin: Any = Field(None, alias="originLocationCode")
    destination: Any = Field(None, alias="destinationLocationCode")
    departure: DateTimeRange = Field(alias="departureDateTimeRange")


class Traveler(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    traveler_type: str = Field("ADULT", alias="travelerType")


class ConnectionRestriction(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    max_connections: int = Field(alias="maxNumberOfConnections")


class FlightFilters(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    connection_restriction: Optional[ConnectionRestriction] = Field(None, alias="connectionRestriction")


class CabinRestriction(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    cabin: Any
    coverage: str = "MOST_SEGMENTS"
    origin_destination_ids: List[str] = Field(alias="originDestinationIds")


class SearchCriteria(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    max_flight_offers: int = Field(alias="maxFlightOffers")
    flight_filters: FlightFilters = Field(default_factory=FlightFilters, alias="flightFilters")
    cabin_restrictions: Optional[List[CabinRestriction]] = Field(None, alias="cabinRestrictions")


class FlightOffersSearchBody(BaseModel):
    """Request body for POST /v2/shopping/flight-offers."""

    model_config = ConfigDict(populate_by_name=True)

    currency: Any = Field(alias="currencyCode")
    origin_destinations: List[OriginDestination] = Field(alias="originDestinations")
    travelers: List[Traveler]
    sources: List[str] = Field(default_factory=lambda: ["GDS"])
    search_criteria: SearchCriteria = Field(alias="searchCriteria")

    def to_json(self) -> Dict[str, Any]:
        # flightFilters stays as {} when empty; unset optionals are dropped
        return self.model_dump(by_alias=True, exclude_none=True)


def build_travelers(adults: int) -> List[Traveler]:
    """
    Build travelers array of ADULTs with sequential string ids starting at '1'.
    """
    return [Traveler(id=str(i + 1)) for i in range(max(0, adults))]


def build_origin_destinations(origin: Any, destination: Any,
                              dep_date: Any, ret_date: Any) -> List[OriginDestination]:
    """
    One-way uses a single leg; if ret_date is provided, add a reverse leg
    with id '2' for the return trip.
    """
    legs = [
        OriginDestination(
            id="1",
            origin=origin,
            destination=destination,
            departure=DateTimeRange(date=dep_date),
        )
    ]
    if ret_date:
        legs.append(OriginDestination(
            id="2",
            origin=destination,
            destination=origin,
            departure=DateTimeRange(date=ret_date),
        ))
    return legs


def clamp_max_offers(requested: Optional[int]) -> int:
    return min(requested or settings.DEFAULT_MAX_OFFERS, settings.MAX_OFFERS_CAP)


def build_search_payload(req: SearchRequest) -> FlightOffersSearchBody:
    legs = build_origin_destinations(req.origin, req.destination, req.departure_date, req.return_date)
    criteria = SearchCriteria(max_flight_offers=clamp_max_offers(req.max_offers))

    if req.non_stop is not None:
        criteria.flight_filters.connection_restriction = ConnectionRestriction(
            max_connections=0 if req.non_stop else 3
        )

    if req.travel_class:
        criteria.cabin_restrictions = [
            CabinRestriction(
                cabin=req.travel_class,
                origin_destination_ids=[leg.id for leg in legs],
            )
        ]

    return FlightOffersSearchBody(
        currency=req.currency,
        origin_destinations=legs,
        travelers=build_travelers(req.adults),
        search_criteria=criteria,
    )
