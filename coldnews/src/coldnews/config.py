import os
import logging
from pathlib import Path
from typing import Dict, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

logger = logging.getLogger(__name__)

DEFAULT_HTTP_TIMEOUT = 10.0
DEFAULT_TIMEZONE = "Asia/Taipei"
DEFAULT_MAX_WORKERS = 8

# Yahoo and CNN both reject the default python-requests agent
USER_AGENT = "Mozilla/5.0 (compatible; coldnews/0.1)"

def load_env_file(path: str = ".env"):
    """
    Load environment variables from a .env file into os.environ.
    Does not override existing strings.
    """
    p = Path(path)
    if not p.exists():
        return

    try:
        with open(p) as f:
            for line in f:
                line = line.strip()
                if not line or line.startswith('#'):
                    continue
                if '=' in line:
                    key, val = line.split('=', 1)
                    key = key.strip()
                    val = val.strip().strip('"').strip("'")
                    if key not in os.environ:
                        os.environ[key] = val
    except OSError as e:
        logger.warning(f"Failed to load .env: {e}")

# Load on import
load_env_file()

def get_gemini_key() -> Optional[str]:
    """Get Gemini API key, or None if missing."""
    key = os.environ.get("GEMINI_API_KEY")
    # Handle the template default
    if not key or key == "your_key_here":
        return None
    return key

def get_http_timeout() -> float:
    raw = os.environ.get("COLDNEWS_HTTP_TIMEOUT")
    if not raw:
        return DEFAULT_HTTP_TIMEOUT
    try:
        value = float(raw)
    except ValueError:
        logger.warning(f"Ignoring invalid COLDNEWS_HTTP_TIMEOUT={raw!r}")
        return DEFAULT_HTTP_TIMEOUT
    return value if value > 0 else DEFAULT_HTTP_TIMEOUT

def get_max_workers() -> int:
    raw = os.environ.get("COLDNEWS_MAX_WORKERS")
    if not raw:
        return DEFAULT_MAX_WORKERS
    try:
        value = int(raw)
    except ValueError:
        logger.warning(f"Ignoring invalid COLDNEWS_MAX_WORKERS={raw!r}")
        return DEFAULT_MAX_WORKERS
    return max(1, value)

def get_display_timezone() -> ZoneInfo:
    """Timezone used for the HH:MM display time of news items."""
    name = os.environ.get("COLDNEWS_TIMEZONE") or DEFAULT_TIMEZONE
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning(f"Unknown timezone {name!r}, using {DEFAULT_TIMEZONE}")
        return ZoneInfo(DEFAULT_TIMEZONE)

def request_headers(force_refresh: bool = False) -> Dict[str, str]:
    """Headers for every outbound request; force_refresh bypasses intermediate caches."""
    headers = {"User-Agent": USER_AGENT}
    if force_refresh:
        headers["Cache-Control"] = "no-cache"
        headers["Pragma"] = "no-cache"
    return headers
