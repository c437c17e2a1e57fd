# storefront/utils/settings.py
import os
from dotenv import load_dotenv

load_dotenv()

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./storefront.db")
REDIS_URL = os.getenv("REDIS_URL", "redis://redis:6379/0")
CELERY_BROKER_URL = os.getenv("CELERY_BROKER_URL", REDIS_URL)
CELERY_RESULT_BACKEND = os.getenv("CELERY_RESULT_BACKEND", "redis://redis:6379/2")
CELERY_TASK_ALWAYS_EAGER = os.getenv("CELERY_TASK_ALWAYS_EAGER", "false").lower() in ("1", "true", "yes")

# optimistic concurrency: 5 attempts, 10ms -> 20ms -> 40ms ...
CART_TX_MAX_ATTEMPTS = int(os.getenv("CART_TX_MAX_ATTEMPTS", 5))
CART_TX_BACKOFF_SECONDS = float(os.getenv("CART_TX_BACKOFF_SECONDS", 0.01))
CART_TX_BACKOFF_MAX_SECONDS = float(os.getenv("CART_TX_BACKOFF_MAX_SECONDS", 1.0))

PRODUCTS_PAGE_LIMIT = int(os.getenv("PRODUCTS_PAGE_LIMIT", 10))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
