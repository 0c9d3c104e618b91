from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

import certifi


def fix_ssl_env() -> None:
    """Normalize SSL certificate env vars before the HTTP client is built.

    - SSL_CERT_FILE pointing at a missing file is replaced by the certifi bundle.
    - SSL_CERT_DIR pointing at a missing directory is unset.
    """
    cert_file = os.environ.get("SSL_CERT_FILE")
    cert_dir = os.environ.get("SSL_CERT_DIR")
    if cert_file and not os.path.exists(cert_file):
        os.environ["SSL_CERT_FILE"] = certifi.where()
    if cert_dir and not os.path.isdir(cert_dir):
        os.environ.pop("SSL_CERT_DIR", None)


def env_str(name: str, default: Optional[str] = None) -> Optional[str]:
    value = os.environ.get(name)
    if value is None or not value.strip():
        return default
    return value.strip()


def env_float(name: str, default: Optional[float] = None) -> Optional[float]:
    raw = env_str(name)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def default_data_dir() -> Path:
    """Directory holding the JSON state files."""
    override = env_str("COINVISTA_DATA_DIR")
    if override:
        return Path(override).expanduser()
    return Path.home() / ".coinvista" / "data"
