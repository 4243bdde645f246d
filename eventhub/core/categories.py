# eventhub/core/categories.py
# Single source for service categories: used by the service schemas
# and by the public /services/categories/list endpoint.

SERVICE_CATEGORIES = (
    "Stage Decoration",
    "Balloon Decoration",
    "Floral Arrangement",
    "Makeup Services",
    "Welcome Hosts",
    "Photography & Videography",
    "Live Streaming",
    "DJ Services",
    "Live Music Performers",
    "Traditional Artists",
    "Kids Entertainment",
    "Anchors / Emcees",
    "Mehndi (Henna)",
    "Grooming & Spa",
    "Return Gifts",
    "Invitation & Sign Boards",
    "Food Stalls / Add-ons",
    "Tent & Furniture Rental",
    "Helpers & Crew",
    "Grand Entry Setup",
)


def is_valid_category(name: str) -> bool:
    return name in SERVICE_CATEGORIES
