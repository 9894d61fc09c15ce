# backend/app/core/constants.py
"""Application-wide constants."""

BRAND_NAME = "Why Designers"

API_TITLE = f"{BRAND_NAME} API"
API_DESCRIPTION = "Counseling, bookings, CRM and content backend"
API_VERSION = "1.0.0"

# Logical tables (suffixes; the configured prefix is prepended)
USERS_TABLE = "users"
LEADS_TABLE = "leads"
LEAD_ACTIVITIES_TABLE = "lead-activities"
BLOGS_TABLE = "blogs"
CATEGORIES_TABLE = "categories"
BOOKINGS_TABLE = "bookings"
BOOKING_SLOTS_TABLE = "booking-slots"
COUNSELORS_TABLE = "counselors"
TESTIMONIALS_TABLE = "testimonials"
TEAM_TABLE = "team"
MATERIALS_TABLE = "materials"
REELS_TABLE = "reels"
VIDEOS_TABLE = "videos"
BANNERS_TABLE = "banners"

# Pagination
DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
MAX_LIMIT = 100

# Bookings
DEFAULT_BOOKING_DURATION = 60
MIN_BOOKING_DURATION = 15
MAX_BOOKING_DURATION = 240

# Content
EXCERPT_LENGTH = 200
MIN_RATING = 0
MAX_RATING = 5

# Storage folders
MATERIALS_FOLDER = "materials"
REELS_FOLDER = "reels"
VIDEOS_FOLDER = "videos"
BANNERS_FOLDER = "banners"
