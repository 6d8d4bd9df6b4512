# Firestore collections
USERS_COLLECTION = "users"
POSTS_COLLECTION = "posts"
SAVES_COLLECTION = "saves"
COMMENTS_COLLECTION = "comments"

# Session keys
SESSION_ACCOUNT_ID = "account_id"
SESSION_USER_ID = "user_id"

# Storage
UPLOADS_PREFIX = "uploads"
ALLOWED_IMAGE_EXTENSIONS = ["jpg", "jpeg", "png", "gif", "svg", "webp"]

# Image preview transform
PREVIEW_WIDTH = 2000
PREVIEW_HEIGHT = 2000
PREVIEW_GRAVITY = "top"
PREVIEW_QUALITY = 100

# Fallbacks used when enriching records with author details
DEFAULT_PROFILE_IMAGE = "/assets/icons/profile-placeholder.svg"
UNKNOWN_USER_NAME = "Unknown"

# Listing defaults
RECENT_POSTS_LIMIT = 20
FEED_PAGE_SIZE = 9
