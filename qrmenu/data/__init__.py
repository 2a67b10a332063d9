"""Bundled demo content."""

from qrmenu.data.static_data import (
    LAST_STATIC_USAGE_FIELD,
    LAST_UPDATED_FIELD,
    MIN_CATEGORIES_THRESHOLD,
    USING_STATIC_DATA_FLAG,
    get_static_data,
    static_restaurant_name,
)

__all__ = [
    "LAST_STATIC_USAGE_FIELD",
    "LAST_UPDATED_FIELD",
    "MIN_CATEGORIES_THRESHOLD",
    "USING_STATIC_DATA_FLAG",
    "get_static_data",
    "static_restaurant_name",
]
