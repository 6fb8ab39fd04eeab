"""
Application configuration.
Environment variables are loaded from a local .env file when present.
"""

import os
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# ---------------------- GEMINI ----------------------
GEMINI_FLASH_MODEL = os.getenv("GEMINI_FLASH_MODEL", "gemini-2.5-flash")
GEMINI_PRO_MODEL = os.getenv("GEMINI_PRO_MODEL", "gemini-2.5-pro")
GEMINI_THINKING_BUDGET = int(os.getenv("GEMINI_THINKING_BUDGET", 32768))
GEMINI_REQUEST_TIMEOUT = float(os.getenv("GEMINI_REQUEST_TIMEOUT", 60))

# Rendered prompts longer than this are rejected instead of being sent
MAX_PROMPT_CHARS = int(os.getenv("MAX_PROMPT_CHARS", 100000))

# ---------------------- LOGGING ----------------------
LOG_DIR = os.getenv("LOG_DIR", "logs")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_TO_FILE = os.getenv("LOG_TO_FILE", "true").lower() in ("1", "true", "yes")

# ---------------------- SERVER ----------------------
PORT = int(os.getenv("PORT", 5000))


def get_api_key():
    """Return the Gemini credential, read at call time."""
    return os.getenv("GEMINI_API_KEY") or None
