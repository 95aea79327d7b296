"""Validation thresholds shared by validators, services and tests."""

PRODUCT_NAME_MIN_LENGTH = 3
PRODUCT_NAME_MAX_LENGTH = 50
PRODUCT_DESCRIPTION_MIN_LENGTH = 10
PRODUCT_DESCRIPTION_MAX_LENGTH = 100
PRODUCT_PRICE_DECIMAL_PLACES = 2
MAX_PHOTOS_PER_PRODUCT = 5
MAX_PRODUCTS_PER_SESSION = 6

MAX_PHOTO_FILE_SIZE_BYTES = 10 * 1024 * 1024
MAX_FILE_NAME_LENGTH = 255
ALLOWED_PHOTO_MIME_TYPES = ("image/jpeg", "image/png", "image/webp")

MAX_BUSINESS_PHOTOS = 30
MAX_BUSINESS_PHOTOS_TOTAL_BYTES = 300 * 1024 * 1024

MIN_PALETTE_COLORS = 1
MAX_PALETTE_COLORS = 8

# Included in the base package, never sold as add-ons.
BASE_PACKAGE_LANGUAGES = ("en", "it")
ADD_ON_LANGUAGES = (
    "nl",
    "fr",
    "de",
    "pt",
    "es",
    "da",
    "fi",
    "no",
    "sv",
    "bg",
    "cs",
    "hu",
    "pl",
    "ro",
    "sk",
    "uk",
    "sq",
    "bs",
    "hr",
    "el",
    "sr",
    "sl",
    "tr",
    "ca",
    "lv",
    "lt",
)
