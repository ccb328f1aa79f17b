"""
Local credential helper package.

Generates TOTP codes from stored shared secrets, and generates and stores
random passwords and numeric PINs. Each credential class lives in its own
JSON file under the user's configuration directory.
"""

from __future__ import annotations

from dotenv import load_dotenv

# Load local env vars when present (e.g. CREDHELPER_CONFIG_DIR).
load_dotenv()

__version__ = "0.1.0"
__all__: list[str] = []
