"""
Constants for the Pack Planner application.

This module defines all system-wide constants including:
- Application metadata
- Gear categories and category sentinels
- Weight conversion factors and display units
- Validation limits and error messages
"""

from typing import List

# ============================================================================
# Application Metadata
# ============================================================================

APP_VERSION = "0.1.0"

# ============================================================================
# Gear Categories
# ============================================================================

# Assigned to gear saved without a category
UNCATEGORIZED = "Uncategorized"

# Used when an assignment's gear can no longer be resolved
UNKNOWN_CATEGORY = "Unknown"

GEAR_CATEGORIES: List[str] = [
    "Backpack",
    "Clothing",
    "Containers",
    "Cooking",
    "Electronics",
    "Emergency",
    "Extras",
    "First Aid",
    "Food",
    "Footwear",
    "Hiking Tools",
    "Hydration",
    "Hygiene",
    "Navigation",
    "Personal Items",
    "Sacks",
    "Shelter",
    "Sleep System",
    "Survival",
    "Tools",
    UNCATEGORIZED,
    "Water",
]

# ============================================================================
# Weight Units
# ============================================================================

GRAMS_PER_OUNCE = 28.34952
OUNCES_PER_POUND = 16
GRAMS_PER_KILOGRAM = 1000

IMPERIAL_MAJOR_UNIT = "Lb"
IMPERIAL_MINOR_UNIT = "Oz"
METRIC_MAJOR_UNIT = "Kg"
METRIC_MINOR_UNIT = "Grams"

IMPERIAL_UNIT_LABEL = "lbs/oz"
METRIC_UNIT_LABEL = "kg/g"

# ============================================================================
# Hike Defaults
# ============================================================================

MAX_EXTERNAL_LINKS = 3
COPY_NAME_PREFIX = "Copy of "

# ============================================================================
# Validation Constants
# ============================================================================

# String length limits
MAX_NAME_LENGTH = 200
MAX_CATEGORY_LENGTH = 100
MAX_DESCRIPTION_LENGTH = 2000
MAX_NOTES_LENGTH = 2000
MAX_LINK_LENGTH = 500

# Numeric limits
MIN_QUANTITY = 1

# ============================================================================
# Database Constants
# ============================================================================

DATABASE_FILENAME = "pack_planner.db"

TABLE_GEAR = "gear"
TABLE_HIKE = "hikes"
TABLE_HIKE_GEAR = "hike_gear"

# ============================================================================
# Error Messages
# ============================================================================

ERROR_REQUIRED_FIELD = "This field is required"
ERROR_INVALID_NUMBER = "Please enter a valid number"
ERROR_INVALID_NON_NEGATIVE = "Value must be zero or greater"
ERROR_INVALID_QUANTITY = f"Quantity must be a whole number of at least {MIN_QUANTITY}"
ERROR_INVALID_CATEGORY = "Invalid category"
