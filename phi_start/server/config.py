# server/config.py
# ---------------------------------------------------------
# Environment-driven settings for the Phi backend.
#
# Values come from .env (project root, then this package)
# and the process environment.
# ---------------------------------------------------------

import logging
import os
from pathlib import Path

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

# .../phi_start/server
BASE_DIR = Path(__file__).resolve().parent
# .../phi_start
ROOT_DIR = BASE_DIR.parent

load_dotenv(ROOT_DIR / ".env")
load_dotenv(BASE_DIR / ".env")
load_dotenv()

ANTHROPIC_API_KEY = os.getenv("ANTHROPIC_API_KEY")
MODEL = os.getenv("ANTHROPIC_MODEL") or "claude-sonnet-4-5-20250929"
MAX_TOKENS = int(os.getenv("PHI_MAX_TOKENS") or 2048)

SUPPORTED_LANGUAGES = ("en", "ar")
DEFAULT_LANGUAGE = (os.getenv("PHI_DEFAULT_LANGUAGE") or "ar").lower()
if DEFAULT_LANGUAGE not in SUPPORTED_LANGUAGES:
    logger.warning(
        "PHI_DEFAULT_LANGUAGE=%r is not one of %s; using 'ar'",
        DEFAULT_LANGUAGE,
        SUPPORTED_LANGUAGES,
    )
    DEFAULT_LANGUAGE = "ar"
SUBSCRIPTION_URL = os.getenv("PHI_SUBSCRIPTION_URL") or "https://example.com/subscribe"

STORE_DIR = Path(os.getenv("PHI_STORE_DIR") or BASE_DIR / "store")
CACHE_TTL_HOURS = float(os.getenv("PHI_CACHE_TTL_HOURS") or 12)
