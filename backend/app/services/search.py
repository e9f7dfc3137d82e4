"""
Listing and service-provider search.

Filters, sorts and paginates an in-memory candidate list. Everything here is
a pure function of (criteria, candidates): no I/O, no clock, no randomness.
Unparseable numbers never raise; they fall back to the most permissive value
so a bad query string shows everything instead of an error page.
"""

import math
import re
from typing import Any, Mapping, Sequence, TypeVar

from pydantic import BaseModel

from app.schemas.search import ListingCard, ServiceCard, SearchPage

T = TypeVar("T")

# Selecting "Others" in the type/category dropdown means "don't filter".
OTHERS = "Others"
DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def parse_int(value: Any, default: Any) -> Any:
    """Parse an integer the way a query string is usually meant.

    Accepts ints, numeric strings and strings with a leading integer
    ("12abc" -> 12). Anything else returns ``default``.
    """
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else default
    match = _LEADING_INT.match(str(value))
    if not match:
        return default
    return int(match.group(1))


def _text(value: Any) -> str | None:
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def _pick(params: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        if params.get(key) not in (None, ""):
            return params[key]
    return None


def _page_bounds(
    params: Mapping[str, Any], default_page_size: int, max_page_size: int
) -> tuple[int, int]:
    page = parse_int(_pick(params, "page"), 1)
    if page < 1:
        page = 1
    page_size = parse_int(_pick(params, "pageSize", "page_size"), default_page_size)
    if page_size < 1:
        page_size = default_page_size
    return page, min(page_size, max_page_size)


class SearchCriteria(BaseModel):
    intent: str | None = None
    property_type: str | None = None
    country: str | None = None
    state: str | None = None
    city: str | None = None
    budget_min: int = 0
    budget_max: float = math.inf
    min_bedrooms: int | None = None
    page: int = 1
    page_size: int = DEFAULT_PAGE_SIZE

    @classmethod
    def from_params(
        cls,
        params: Mapping[str, Any],
        default_page_size: int = DEFAULT_PAGE_SIZE,
        max_page_size: int = MAX_PAGE_SIZE,
    ) -> "SearchCriteria":
        """Build criteria from a raw query-parameter bag. Never raises."""
        budget_min = parse_int(_pick(params, "budgetMin", "budget_min"), 0)
        budget_max = parse_int(_pick(params, "budgetMax", "budget_max"), math.inf)
        if budget_max <= 0:
            budget_max = math.inf
        min_bedrooms = parse_int(_pick(params, "minBedrooms", "min_bedrooms"), None)
        if min_bedrooms is not None and min_bedrooms < 1:
            min_bedrooms = None
        page, page_size = _page_bounds(params, default_page_size, max_page_size)

        return cls(
            intent=_text(_pick(params, "intent")),
            property_type=_text(_pick(params, "propertyType", "property_type")),
            country=_text(_pick(params, "country")),
            state=_text(_pick(params, "state")),
            city=_text(_pick(params, "city")),
            budget_min=max(budget_min, 0),
            budget_max=budget_max,
            min_bedrooms=min_bedrooms,
            page=page,
            page_size=page_size,
        )


class ServiceCriteria(BaseModel):
    category: str | None = None
    country: str | None = None
    state: str | None = None
    city: str | None = None
    page: int = 1
    page_size: int = DEFAULT_PAGE_SIZE

    @classmethod
    def from_params(
        cls,
        params: Mapping[str, Any],
        default_page_size: int = DEFAULT_PAGE_SIZE,
        max_page_size: int = MAX_PAGE_SIZE,
    ) -> "ServiceCriteria":
        page, page_size = _page_bounds(params, default_page_size, max_page_size)
        return cls(
            category=_text(_pick(params, "category")),
            country=_text(_pick(params, "country")),
            state=_text(_pick(params, "state")),
            city=_text(_pick(params, "city")),
            page=page,
            page_size=page_size,
        )


def _city_matches(city: str | None, needle: str) -> bool:
    return needle.lower() in (city or "").lower()


def _same_text(value: str | None, expected: str) -> bool:
    return (value or "").lower() == expected.lower()


def _within_budget(price: int | None, criteria: SearchCriteria) -> bool:
    # "Price on request" listings are never excluded by a budget.
    if price is None:
        return True
    return criteria.budget_min <= price <= criteria.budget_max


def filter_listings(
    criteria: SearchCriteria, candidates: Sequence[ListingCard]
) -> list[ListingCard]:
    """Apply the predicate chain. The result is a subset of ``candidates``."""
    results = list(candidates)

    if criteria.intent:
        results = [l for l in results if _same_text(l.intent, criteria.intent)]
    if criteria.property_type and criteria.property_type != OTHERS:
        results = [l for l in results if l.type == criteria.property_type]
    if criteria.country:
        results = [l for l in results if _same_text(l.country, criteria.country)]
    if criteria.state:
        results = [l for l in results if _same_text(l.state, criteria.state)]
    if criteria.city:
        results = [l for l in results if _city_matches(l.city, criteria.city)]

    results = [l for l in results if _within_budget(l.price_inr, criteria)]

    if criteria.min_bedrooms:
        results = [l for l in results if (l.bedrooms or 0) >= criteria.min_bedrooms]

    return results


def sort_listings(
    criteria: SearchCriteria, listings: Sequence[ListingCard]
) -> list[ListingCard]:
    """Relevance sort: city matches first, then price.

    Price is ascending except for the sell intent, which surfaces premium
    listings first. Listings without a price always sort last.
    """
    city = criteria.city
    descending = (criteria.intent or "").lower() == "sell"

    def key(listing: ListingCard) -> tuple[int, int, int]:
        city_rank = 0 if not city or _city_matches(listing.city, city) else 1
        if listing.price_inr is None:
            return (city_rank, 1, 0)
        price = -listing.price_inr if descending else listing.price_inr
        return (city_rank, 0, price)

    return sorted(listings, key=key)


def paginate(items: Sequence[T], page: int, page_size: int) -> SearchPage:
    start = (page - 1) * page_size
    end = page * page_size
    return SearchPage(
        items=list(items[start:end]),
        total=len(items),
        page=page,
        page_size=page_size,
        has_more=end < len(items),
    )


def search_listings(
    criteria: SearchCriteria, candidates: Sequence[ListingCard]
) -> SearchPage:
    filtered = filter_listings(criteria, candidates)
    return paginate(sort_listings(criteria, filtered), criteria.page, criteria.page_size)


def _category_matches(category: str, wanted: str) -> bool:
    category, wanted = category.lower(), wanted.lower()
    return wanted in category or category in wanted


def filter_services(
    criteria: ServiceCriteria, candidates: Sequence[ServiceCard]
) -> list[ServiceCard]:
    results = list(candidates)

    if criteria.category and criteria.category != OTHERS:
        results = [s for s in results if _category_matches(s.category, criteria.category)]
    if criteria.country:
        # Providers are only listed with a full Indian address for now.
        results = [s for s in results if s.state and s.city]
    if criteria.state:
        results = [s for s in results if _same_text(s.state, criteria.state)]
    if criteria.city:
        results = [s for s in results if _city_matches(s.city, criteria.city)]

    return results


def sort_services(
    criteria: ServiceCriteria, services: Sequence[ServiceCard]
) -> list[ServiceCard]:
    """City matches first, then rating descending; unrated providers last."""
    city = criteria.city

    def key(service: ServiceCard) -> tuple[int, int, float]:
        city_rank = 0 if not city or _city_matches(service.city, city) else 1
        if service.rating is None:
            return (city_rank, 1, 0.0)
        return (city_rank, 0, -service.rating)

    return sorted(services, key=key)


def search_services(
    criteria: ServiceCriteria, candidates: Sequence[ServiceCard]
) -> SearchPage:
    filtered = filter_services(criteria, candidates)
    return paginate(sort_services(criteria, filtered), criteria.page, criteria.page_size)
