"""
Static demo catalog.

Used as the search candidate list when the database has nothing to offer
(fresh install, or the query failed). Demo ids are short strings rather than
UUIDs, which is how the client tells demo cards from real listings.
"""

from app.schemas.search import ListingCard, ServiceCard


def _listing(**kwargs) -> ListingCard:
    kwargs.setdefault("demo", True)
    kwargs.setdefault("country", "India")
    kwargs.setdefault("image", "/placeholder.svg")
    kwargs.setdefault("url", f"/property/{kwargs['id']}")
    return ListingCard(**kwargs)


def _service(**kwargs) -> ServiceCard:
    kwargs.setdefault("demo", True)
    kwargs.setdefault("image", "/placeholder.svg")
    kwargs.setdefault("whatsapp", kwargs["phone"])
    kwargs.setdefault("url", f"/service/{kwargs['id']}")
    return ServiceCard(**kwargs)


DEMO_LISTINGS: list[ListingCard] = [
    _listing(
        id="1",
        title="Luxury 3BHK Apartment in Gachibowli",
        type="Apartment/Flat",
        intent="buy",
        price_inr=12500000,
        city="Hyderabad",
        state="Telangana",
        bedrooms=3,
        badges=["Ready to Move", "Gated Community"],
    ),
    _listing(
        id="2",
        title="Commercial Office Space in Cyber City",
        type="Office",
        intent="lease",
        price_inr=85000,
        city="Gurgaon",
        state="Haryana",
        badges=["Furnished", "IT Park"],
    ),
    _listing(
        id="3",
        title="Independent Villa with Garden",
        type="Independent House/Villa",
        intent="sell",
        price_inr=8500000,
        city="Bangalore",
        state="Karnataka",
        bedrooms=4,
        badges=["Swimming Pool", "Parking"],
    ),
    _listing(
        id="4",
        title="Residential Plot in Sector 85",
        type="Plot/Land",
        intent="buy",
        price_inr=6800000,
        city="Gurgaon",
        state="Haryana",
        badges=["Corner Plot", "Approved"],
    ),
    _listing(
        id="5",
        title="Retail Shop in Prime Location",
        type="Retail/Shop",
        intent="lease",
        price_inr=45000,
        city="Mumbai",
        state="Maharashtra",
        badges=["High Footfall", "Ground Floor"],
    ),
    _listing(
        id="6",
        title="2BHK Apartment near IT Hub",
        type="Apartment/Flat",
        intent="buy",
        price_inr=7500000,
        city="Pune",
        state="Maharashtra",
        bedrooms=2,
        badges=["New Construction", "Metro Nearby"],
    ),
    _listing(
        id="7",
        title="Warehouse Space for Logistics",
        type="Warehouse",
        intent="lease",
        price_inr=125000,
        city="Chennai",
        state="Tamil Nadu",
        badges=["24x7 Security", "Truck Access"],
    ),
    _listing(
        id="8",
        title="Penthouse with City View",
        type="Apartment/Flat",
        intent="sell",
        price_inr=25000000,
        city="Mumbai",
        state="Maharashtra",
        bedrooms=4,
        badges=["Luxury", "Sea View"],
    ),
]


DEMO_SERVICES: list[ServiceCard] = [
    _service(
        id="1",
        name="Elite Property Management",
        category="Property Management",
        city="Hyderabad",
        state="Telangana",
        phone="+91-9876541234",
        rating=4.8,
        experience="8+ years",
    ),
    _service(
        id="2",
        name="Home Interior Experts",
        category="Home Interiors",
        city="Bangalore",
        state="Karnataka",
        phone="+91-9876541235",
        rating=4.6,
        experience="5+ years",
    ),
    _service(
        id="3",
        name="Legal Documentation Services",
        category="Legal & Documentation",
        city="Mumbai",
        state="Maharashtra",
        phone="+91-9876541236",
        rating=4.9,
        experience="12+ years",
    ),
    _service(
        id="4",
        name="Quick Home Loans",
        category="Home Loan Assistance",
        city="Delhi",
        state="Delhi",
        phone="+91-9876541237",
        rating=4.7,
        experience="6+ years",
    ),
    _service(
        id="5",
        name="Property Valuation Pro",
        category="Property Valuation",
        city="Pune",
        state="Maharashtra",
        phone="+91-9876541238",
        rating=4.5,
        experience="10+ years",
    ),
    _service(
        id="6",
        name="NRI Property Consultants",
        category="NRI Property Assistance",
        city="Chennai",
        state="Tamil Nadu",
        phone="+91-9876541239",
        rating=4.8,
        experience="15+ years",
    ),
    _service(
        id="7",
        name="Rental & Leasing Experts",
        category="Rental & Leasing",
        city="Gurgaon",
        state="Haryana",
        phone="+91-9876541240",
        rating=4.4,
        experience="7+ years",
    ),
    _service(
        id="8",
        name="Property Maintenance Plus",
        category="Property Maintenance & Repairs",
        city="Kolkata",
        state="West Bengal",
        phone="+91-9876541241",
        rating=4.6,
        experience="9+ years",
    ),
]

DEMO_LISTINGS_BY_ID: dict[str, ListingCard] = {card.id: card for card in DEMO_LISTINGS}
DEMO_SERVICES_BY_ID: dict[str, ServiceCard] = {card.id: card for card in DEMO_SERVICES}
