"""
utils/constants.py

Purpose: Centralized static content

- User-facing error and status messages
- Storage bucket names and upload MIME maps
- Field allow-lists for site updates

(Prevents hardcoding across the codebase)
"""

# ============================================================
# SITE TYPES
# ============================================================

SITE_TYPE_SHOP = "Shop"
SITE_TYPE_MENU = "Menu"

# ============================================================
# STORAGE BUCKETS
# ============================================================

BUCKET_VOICE_RECORDINGS = "voice-recordings"
BUCKET_SHOP_IMAGES = "shop-images"
BUCKET_PRODUCT_IMAGES = "product-images"

STORAGE_BUCKETS = (
    BUCKET_VOICE_RECORDINGS,
    BUCKET_SHOP_IMAGES,
    BUCKET_PRODUCT_IMAGES,
)

# ============================================================
# AUDIO
# ============================================================

DEFAULT_AUDIO_MIME = "audio/webm"
DEFAULT_RECORDING_NAME = "recording.webm"

AUDIO_MIME_TYPES = {
    "webm": "audio/webm",
    "mp3": "audio/mpeg",
    "wav": "audio/wav",
    "mp4": "audio/mp4",
    "m4a": "audio/x-m4a",
    "ogg": "audio/ogg",
    "flac": "audio/flac",
    "aac": "audio/aac",
}

# Context values accepted by /voice/process
EXTRACTION_CONTEXTS = ("name", "details", "product")

# ============================================================
# SITE FIELDS
# ============================================================

# Fields a signed-in account may change through PATCH /sites/{id}
SITE_UPDATABLE_FIELDS = (
    "name",
    "description",
    "timing",
    "location",
    "image_url",
    "owner_name",
    "contact_number",
    "email",
    "whatsapp_number",
    "tagline",
    "established_year",
    "state",
    "pincode",
    "address",
    "social_links",
)

# Narrower set a phone-authenticated shop owner may change
OWNER_UPDATABLE_FIELDS = (
    "name",
    "description",
    "timing",
    "location",
    "contact_number",
    "email",
    "whatsapp_number",
    "image_url",
    "tagline",
)

PRODUCT_UPDATABLE_FIELDS = ("name", "price", "description", "image_url", "is_live")

# ============================================================
# MESSAGES
# ============================================================

MSG_INVALID_PHONE = "Invalid phone number format"
MSG_PHONE_REQUIRED = "Phone number is required"
MSG_PHONE_NOT_OWNER = "This phone number is not registered as a shop owner"
MSG_OTP_SENT = "OTP sent successfully"
MSG_OTP_REQUIRED = "Phone and OTP are required"
MSG_OTP_INVALID = "Invalid OTP"
MSG_OTP_EXPIRED = "OTP has expired"
MSG_OWNER_NOT_FOUND = "Shop owner not found"
MSG_LOGIN_SUCCESS = "Login successful"
MSG_OTP_SMS = "Your VoiceSite login code is {otp}. It expires in {minutes} minutes."

MSG_SITE_NAME_REQUIRED = "Name is required"
MSG_SITE_NOT_FOUND = "Shop not found"
MSG_SLUG_UNAVAILABLE = "Could not reserve a unique address for this site. Please try again."
MSG_PRODUCT_NAME_REQUIRED = "Product name is required"
MSG_PRODUCT_NOT_FOUND = "Product not found"

MSG_PLAN_EXPIRED = "{label} plan has expired. Please recharge."
MSG_NO_ACTIVE_PLAN = "No active plan. Please purchase a {label} plan to publish."
MSG_LIMIT_REACHED = "{label} limit reached ({limit}). Upgrade your plan to create more."
MSG_PRODUCT_LIMIT_REACHED = "Product limit reached ({limit}) for your {label} plan."
MSG_PLAN_STILL_ACTIVE = "Your {label} plan is still active until {expires}."

MSG_NO_AUDIO = "No audio file provided"
MSG_NO_AUDIO_URL = "No audio URL provided"
MSG_AUDIO_FETCH_FAILED = "Failed to fetch audio file"
MSG_NO_TRANSCRIPT = "No transcript generated"

MSG_NO_IMAGE = "No image file provided"
MSG_IMAGE_ONLY = "Only image files are allowed"
MSG_IMAGE_TOO_LARGE = "Image must be less than {mb}MB"
MSG_AUDIO_TOO_LARGE = "Audio must be less than {mb}MB"
