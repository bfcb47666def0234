# telecom_cart/utils/settings.py
import os
from dotenv import load_dotenv

load_dotenv()

API_HOST = os.getenv("API_HOST", "0.0.0.0")
API_PORT = int(os.getenv("API_PORT", 3000))
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///:memory:")
# "sql" albo "memory"
CART_STORE = os.getenv("CART_STORE", "sql").lower()
CART_FALLBACK_CACHE = os.getenv("CART_FALLBACK_CACHE", "true").lower() in ("1", "true", "yes")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
CART_FALLBACK_CACHE_SIZE = int(os.getenv("CART_FALLBACK_CACHE_SIZE", 10000))
