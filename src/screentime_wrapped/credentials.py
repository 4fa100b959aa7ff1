"""Persist the Gemini API key between runs."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional

from .paths import get_credentials_path

logger = logging.getLogger(__name__)

# Same key the dashboard page uses in the browser's localStorage.
CREDENTIAL_KEY = "geminiApiKey"


def load_api_key(path: Optional[Path] = None) -> Optional[str]:
    path = Path(path or get_credentials_path())
    if not path.exists():
        return None
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        logger.exception("Failed to read credentials from %s", path)
        return None
    value = payload.get(CREDENTIAL_KEY) if isinstance(payload, dict) else None
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def save_api_key(api_key: str, path: Optional[Path] = None) -> Path:
    api_key = api_key.strip()
    if not api_key:
        raise ValueError("API key must not be empty")
    path = Path(path or get_credentials_path())
    path.write_text(json.dumps({CREDENTIAL_KEY: api_key}), encoding="utf-8")
    path.chmod(0o600)
    logger.info("Saved API key to %s", path)
    return path
