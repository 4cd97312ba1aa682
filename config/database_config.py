from dotenv import load_dotenv
import os

load_dotenv()

BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))

MONGO_URL = os.getenv("MONGO_URL", "mongodb://localhost:27017/chatbot")
MONGO_DB_NAME = os.getenv("MONGO_DB_NAME", "chatbot")  # used when MONGO_URL names no database

# Same pool/timeout settings the site has always run with
MONGO_CLIENT_OPTIONS = {
    "serverSelectionTimeoutMS": 30000,
    "socketTimeoutMS": 45000,
    "connectTimeoutMS": 30000,
    "retryWrites": True,
    "w": "majority",
    "maxPoolSize": 40,
    "minPoolSize": 10,
    "maxIdleTimeMS": 45000,
    "tz_aware": True,
}

# Collection names
CHAT_DATA_COLLECTION = "chatdatas"  # saved chat transcripts
CAROUSEL_IMAGES_COLLECTION = "carouselimages"  # carousel gallery metadata
VISITOR_COUNTER_COLLECTION = "visitorcounters"
QUESTION_REQUEST_COUNTER_COLLECTION = "questionrequestcounters"

# Counter retry policy
COUNTER_MAX_ATTEMPTS = int(os.getenv("COUNTER_MAX_ATTEMPTS", 3))
COUNTER_RETRY_DELAY_SECONDS = float(os.getenv("COUNTER_RETRY_DELAY_SECONDS", 1.0))
COUNTER_READ_TIMEOUT_SECONDS = float(os.getenv("COUNTER_READ_TIMEOUT_SECONDS", 5.0))
SCAN_TIMEOUT_SECONDS = float(os.getenv("SCAN_TIMEOUT_SECONDS", 10.0))

# HTTP
PORT = int(os.getenv("PORT", 8080))
ALLOWED_ORIGINS = [origin.strip() for origin in os.getenv("ALLOWED_ORIGINS", "*").split(",") if origin.strip()]
MAX_BODY_BYTES = int(os.getenv("MAX_BODY_BYTES", 50 * 1024 * 1024))

# Files
UPLOAD_DIR = os.getenv("UPLOAD_DIR", os.path.join(BASE_DIR, "uploads"))
UPLOAD_URL_PREFIX = "/uploads/"
FRONTEND_DIR = os.getenv("FRONTEND_DIR", os.path.join(BASE_DIR, "public"))
ALLOWED_IMAGE_TYPES = ("image/jpeg", "image/png", "image/gif", "image/webp")

# Logging
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FILE = os.getenv("LOG_FILE")  # optional, e.g. server.log
