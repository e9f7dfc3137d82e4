"""
Property submission drafts.

A draft accumulates the fields of the seven-step posting wizard:

    1 Property Details -> 2 Location -> 3 Pricing -> 4 Amenities
    -> 5 Gallery -> 6 Schedule -> 7 Preview

Every forward step merges its fields into the draft; earlier fields are never
erased by a later partial update. On submission the accumulated data is
validated as a whole and converted into a pending listing.
"""

from enum import IntEnum
from typing import Any

from app.config import settings
from app.services.search import parse_int

FORM_TYPES = ("rental", "sale", "commercial", "commercial-sale", "land")
RENTAL_FORMS = {"rental", "commercial"}


class DraftStep(IntEnum):
    PROPERTY_DETAILS = 1
    LOCATION = 2
    PRICING = 3
    AMENITIES = 4
    GALLERY = 5
    SCHEDULE = 6
    PREVIEW = 7

    @property
    def label(self) -> str:
        return self.name.replace("_", " ").title()


TOTAL_STEPS = len(DraftStep)

# (draft field, form field) pairs per step
_PROPERTY_DETAIL_FIELDS = [
    ("apartment_type", "apartmentType"),
    ("apartment_name", "apartmentName"),
    ("bhk_type", "bhkType"),
    ("floor_no", "floorNo"),
    ("total_floors", "totalFloors"),
    ("property_age", "propertyAge"),
    ("facing", "facing"),
    ("built_up_area", "builtUpArea"),
    ("carpet_area", "carpetArea"),
    ("space_type", "spaceType"),
    ("building_type", "buildingType"),
    ("furnishing_status", "furnishingStatus"),
    ("super_built_up_area", "superBuiltUpArea"),
    ("power_load", "powerLoad"),
    ("ceiling_height", "ceilingHeight"),
    ("entrance_width", "entranceWidth"),
    ("loading_facility", "loadingFacility"),
    ("on_main_road", "onMainRoad"),
    ("corner_property", "cornerProperty"),
    ("plot_area", "plotArea"),
    ("plot_area_unit", "plotAreaUnit"),
    ("plot_length", "plotLength"),
    ("plot_width", "plotWidth"),
    ("boundary_wall", "boundaryWall"),
    ("corner_plot", "cornerPlot"),
    ("road_facing", "roadFacing"),
    ("road_width", "roadWidth"),
    ("land_type", "landType"),
    ("plot_shape", "plotShape"),
    ("gated_community", "gatedCommunity"),
    ("gated_project", "gatedProject"),
    ("floors_allowed", "floorsAllowed"),
    ("survey_number", "surveyNumber"),
    ("sub_division", "subDivision"),
    ("village_name", "villageName"),
    ("title", "title"),
]

_LOCATION_FIELDS = [
    ("country", "country"),
    ("state", "state"),
    ("city", "city"),
    ("locality", "locality"),
    ("pincode", "pincode"),
    ("society_name", "societyName"),
    ("landmark", "landmark"),
]

_SALE_FIELDS = [
    ("expected_price", "expectedPrice"),
    ("price_negotiable", "priceNegotiable"),
    ("price_on_request", "priceOnRequest"),
    ("possession_date", "possessionDate"),
    ("description", "description"),
]

_LAND_SALE_FIELDS = _SALE_FIELDS + [("ownership_type", "ownershipType")]

_AMENITY_FIELDS = [
    ("furnishing", "furnishing"),
    ("parking", "parking"),
    ("power_backup", "powerBackup"),
    ("lift", "lift"),
    ("water_supply", "waterSupply"),
    ("security", "security"),
    ("gym", "gym"),
    ("gated_security", "gatedSecurity"),
    ("current_property_condition", "currentPropertyCondition"),
    ("directions_tip", "directionsTip"),
    ("amenities", "amenities"),
]

_LAND_AMENITY_FIELDS = [
    ("water_supply", "waterSupply"),
    ("electricity_connection", "electricityConnection"),
    ("sewage_connection", "sewageConnection"),
    ("road_width", "roadWidth"),
    ("gated_security", "gatedSecurity"),
    ("directions_tip", "directionsToProperty"),
]

_GALLERY_FIELDS = [
    ("images", "images"),
    ("categorized_images", "categorizedImages"),
    ("video", "video"),
]

# Fields that become Listing columns rather than listing details
_LISTING_COLUMNS = {
    "title", "property_type", "intent", "country", "state", "city", "locality",
    "images", "video", "badges", "expected_price", "expected_rent", "price_on_request",
}


def default_listing_type(form_type: str) -> str:
    return "Rent" if form_type in RENTAL_FORMS else "Sale"


def default_property_type(form_type: str) -> str:
    if form_type == "land":
        return "Land/Plot"
    if form_type.startswith("commercial"):
        return "Commercial"
    return "Residential"


def _joined(value: Any) -> Any:
    if isinstance(value, (list, tuple)):
        return ", ".join(str(v) for v in value)
    return value


def _pick_fields(step_data: dict, pairs: list[tuple[str, str]]) -> dict:
    return {field: step_data.get(key) for field, key in pairs}


def _first(step_data: dict, *keys: str) -> Any:
    for key in keys:
        if step_data.get(key):
            return step_data[key]
    return None


def _pricing_fields(step_data: dict, form_type: str) -> dict:
    if form_type in RENTAL_FORMS:
        return {
            "expected_rent": _first(step_data, "expectedPrice", "expectedRent"),
            "expected_deposit": _first(step_data, "securityDeposit", "expectedDeposit"),
            "rent_negotiable": step_data.get("rentNegotiable"),
            "monthly_maintenance": step_data.get("monthlyMaintenance"),
            "available_from": step_data.get("availableFrom"),
            "preferred_tenant": _joined(step_data.get("idealFor")),
            "price_on_request": step_data.get("priceOnRequest"),
            "description": step_data.get("description"),
        }
    if form_type == "land":
        fields = _pick_fields(step_data, _LAND_SALE_FIELDS)
        fields["approved_by"] = _joined(step_data.get("approvedBy"))
        return fields
    return _pick_fields(step_data, _SALE_FIELDS)


def map_step_data(step: int, step_data: dict, form_type: str) -> dict:
    """Map a raw wizard form payload (camelCase) onto draft field names.

    Unset form fields are dropped, so the result can be merged straight into
    an existing draft.
    """
    step = DraftStep(step)

    if step == DraftStep.PROPERTY_DETAILS:
        fields = _pick_fields(step_data, _PROPERTY_DETAIL_FIELDS)
        fields["property_type"] = step_data.get("propertyType") or default_property_type(form_type)
    elif step == DraftStep.LOCATION:
        fields = _pick_fields(step_data, _LOCATION_FIELDS)
    elif step == DraftStep.PRICING:
        fields = _pricing_fields(step_data, form_type)
    elif step == DraftStep.AMENITIES:
        pairs = _LAND_AMENITY_FIELDS if form_type == "land" else _AMENITY_FIELDS
        fields = _pick_fields(step_data, pairs)
    elif step == DraftStep.GALLERY:
        fields = _pick_fields(step_data, _GALLERY_FIELDS)
        images = fields.get("images")
        # Only already-uploaded URLs belong in a draft
        if images is not None:
            fields["images"] = [i for i in images if isinstance(i, str)]
    elif step == DraftStep.SCHEDULE:
        fields = {"schedule_info": dict(step_data)}
    else:
        fields = {}

    return {k: v for k, v in fields.items() if v is not None}


def merge_draft_data(existing: dict | None, updates: dict | None) -> dict:
    """Merge a partial update into accumulated draft data.

    ``None`` values in ``updates`` are ignored so a step that leaves a field
    blank never wipes what an earlier step saved. Merging the same update
    twice gives the same result.
    """
    merged = dict(existing or {})
    for key, value in (updates or {}).items():
        if value is None:
            continue
        merged[key] = value
    return merged


def progress_percent(current_step: int) -> int:
    return round(current_step / TOTAL_STEPS * 100)


def _missing(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, dict)):
        return len(value) == 0
    return False


def _positive(value: Any) -> bool:
    number = parse_int(value, 0) if not isinstance(value, float) else value
    return number > 0


def _required_step_fields(step: DraftStep, form_type: str) -> list[tuple[str, str]]:
    if step == DraftStep.PROPERTY_DETAILS:
        if form_type == "land":
            return [("property_type", "Property type is required"),
                    ("plot_area", "Plot area is required")]
        if form_type.startswith("commercial"):
            return [("property_type", "Property type is required"),
                    ("space_type", "Space type is required")]
        return [("property_type", "Property type is required"),
                ("bhk_type", "BHK type is required")]
    if step == DraftStep.LOCATION:
        return [("state", "State is required"),
                ("city", "City is required"),
                ("locality", "Locality is required")]
    return []


def validate_step(
    step: int,
    data: dict,
    form_type: str = "rental",
    max_images: int | None = None,
) -> dict[str, str]:
    """Check the fields a step owns. Returns ``{field: message}``, empty when valid."""
    step = DraftStep(step)
    errors: dict[str, str] = {}

    for field, message in _required_step_fields(step, form_type):
        if _missing(data.get(field)):
            errors[field] = message

    if step == DraftStep.PRICING and not data.get("price_on_request"):
        price_field = "expected_rent" if form_type in RENTAL_FORMS else "expected_price"
        if not _positive(data.get(price_field)):
            label = "Expected rent" if price_field == "expected_rent" else "Expected price"
            errors[price_field] = f"{label} must be greater than 0"

    if step == DraftStep.GALLERY:
        limit = settings.max_images_per_listing if max_images is None else max_images
        if len(data.get("images") or []) > limit:
            errors["images"] = f"Maximum {limit} images allowed"

    return errors


def validate_submission(
    data: dict,
    form_type: str,
    min_images: int | None = None,
    max_images: int | None = None,
) -> dict[str, str]:
    """Validate the whole accumulated draft before it becomes a listing."""
    errors: dict[str, str] = {}
    for step in DraftStep:
        errors.update(validate_step(step, data, form_type, max_images=max_images))

    minimum = settings.min_images_per_listing if min_images is None else min_images
    if len(data.get("images") or []) < minimum:
        errors["images"] = f"At least {minimum} property images are required"

    return errors


def listing_intent(form_type: str, data: dict) -> str:
    """The search intent a submitted draft is found under."""
    explicit = (data.get("intent") or "").lower()
    if explicit in ("buy", "sell", "rent", "lease"):
        return explicit
    if form_type == "rental":
        return "rent"
    if form_type == "commercial":
        return "lease"
    return "buy"


def generate_title(property_type: str, data: dict) -> str:
    parts = []
    if data.get("bhk_type"):
        parts.append(str(data["bhk_type"]).upper().replace(" ", ""))
    parts.append(property_type)
    where = data.get("locality") or data.get("city")
    if where:
        parts.append(f"in {where}")
    return " ".join(parts)


def draft_to_listing_fields(
    form_type: str, property_type: str, data: dict
) -> dict[str, Any]:
    """Column values for the listing created from a complete draft."""
    if data.get("price_on_request"):
        price = None
    else:
        price_field = "expected_rent" if form_type in RENTAL_FORMS else "expected_price"
        price = parse_int(data.get(price_field), None)

    media = list(data.get("images") or [])
    if data.get("video"):
        media.append(data["video"])

    property_type = data.get("property_type") or property_type

    return {
        "title": data.get("title") or generate_title(property_type, data),
        "property_type": property_type,
        "intent": listing_intent(form_type, data),
        "price_inr": price,
        "country": data.get("country") or "India",
        "state": data["state"],
        "city": data["city"],
        "locality": data.get("locality"),
        "bedrooms": parse_int(data.get("bhk_type"), None),
        "media": media,
        "badges": list(data.get("badges") or []),
        "details": {k: v for k, v in data.items() if k not in _LISTING_COLUMNS},
        "status": "pending",
    }
