# core/config.py
import os
from pathlib import Path

from dotenv import load_dotenv

ROOT_DIR = Path(__file__).resolve().parents[1]
load_dotenv(dotenv_path=ROOT_DIR / ".env")

# Upstream commerce API
API_BASE_URL = os.getenv("API_BASE_URL", "http://localhost:8080").rstrip("/")
FRONTEND_URL = os.getenv("FRONTEND_URL", "http://localhost:5173").rstrip("/")
UPSTREAM_AUTH_COOKIE = os.getenv("UPSTREAM_AUTH_COOKIE", "access_token")
HTTP_TIMEOUT_SECONDS = float(os.getenv("HTTP_TIMEOUT_SECONDS", "15"))

# Visitor session
SECRET_KEY = os.getenv("SECRET_KEY", "change-me")
ALGORITHM = os.getenv("ALGORITHM", "HS256")
SESSION_COOKIE = os.getenv("SESSION_COOKIE", "storefront_session")
SESSION_TTL_DAYS = int(os.getenv("SESSION_TTL_DAYS", "30"))
# wizard progress and navigation state are dropped after this much inactivity
TRANSIENT_TTL_SECONDS = int(os.getenv("TRANSIENT_TTL_SECONDS", str(24 * 3600)))

# Durable mirror
STORAGE_BACKEND = os.getenv("STORAGE_BACKEND", "memory")  # memory | mongo
MONGO_URL = os.getenv("MONGO_URL", "mongodb://localhost:27017")
MONGO_DB = os.getenv("MONGO_DB", "storefront")
CART_STORAGE_KEY = "cart"
CUSTOM_ORDER_STORAGE_KEY = "customOrderData"

# Checkout pricing
SHIPPING_FEE = float(os.getenv("SHIPPING_FEE", "20"))
TAX_RATE = float(os.getenv("TAX_RATE", "0.10"))
DEPOSIT_RATE = float(os.getenv("DEPOSIT_RATE", "0.5"))
CURRENCY = os.getenv("CURRENCY", "GHS")

# Logging / HTTP
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FORMAT = os.getenv("LOG_FORMAT", "%(asctime)s | %(levelname)s | %(name)s | %(message)s")
CORS_ORIGIN_REGEX = os.getenv("CORS_ORIGIN_REGEX", ".*")
