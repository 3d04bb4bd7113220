"""Search indices accepted by ItemSearch. Hand-maintained; not fetched from the service."""

__all__ = ["SEARCH_INDICES"]

SEARCH_INDICES = (
    "All",
    "UnboxVideo",
    "Appliances",
    "MobileApps",
    "ArtsAndCrafts",
    "Automotive",
    "Books",
    "Music",
    "Wireless",
    "Collectibles",
    "PCHardware",
    "Electronics",
    "KindleStore",
    "Movies",
    "OfficeProducts",
    "Software",
    "Tools",
    "VideoGames",
)
