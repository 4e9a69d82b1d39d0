import sys
import os
from datetime import datetime
from typing import Any, Optional


# ═══════════════════════════════════════════════════════════════════════════════
# LOG FILTERING
# ═══════════════════════════════════════════════════════════════════════════════
# Only these scopes are shown at INFO level
# Everything else is gated behind DEBUG

INFO_SCOPES = {
    "STARTUP",      # App lifecycle
    "DB",           # Connection state
    "STORE",        # Persistence failures
    "MONITORING",   # Metrics registration
    "SECURITY",     # Rate limiting, CORS
}

# DEBUG-only scopes (hidden by default)
DEBUG_SCOPES = {
    "PROMPTS",
    "COMBINE",
    "QUERY",
    "AUTH",
    "API",
}


def _debug_enabled() -> bool:
    return os.getenv("PROMPTSHELF_DEBUG", "false").lower() == "true"


def log(scope: str, message: str, data: Any = None, user_id: Optional[str] = None) -> None:
    """
    Unified logging function for PromptShelf.

    Only INFO_SCOPES are shown by default.
    Set PROMPTSHELF_DEBUG=true to see all scopes.
    """
    if not _debug_enabled() and scope not in INFO_SCOPES:
        return

    timestamp = datetime.now().strftime("%H:%M:%S")
    prefix = f"[{timestamp}] [{scope}]"

    if user_id:
        prefix += f" [{user_id[:8]}]"

    print(f"{prefix} {message}")

    if data:
        print(f"  Data: {data}")

    sys.stdout.flush()

