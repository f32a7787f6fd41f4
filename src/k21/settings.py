# src/k21/settings.py
from __future__ import annotations

import os
from typing import Optional

# All knobs are read from the environment at call time so a running
# Streamlit session or a test can change them without re-importing.

def _float_from_env(name: str, default: float) -> float:
    s = os.environ.get(name, "").strip()
    if not s:
        return default
    try:
        return float(s)
    except ValueError:
        return default


def _int_from_env(name: str, default: int) -> int:
    s = os.environ.get(name, "").strip()
    if not s:
        return default
    try:
        return int(s)
    except ValueError:
        return default


def upload_url() -> Optional[str]:
    url = os.environ.get("K21_UPLOAD_URL", "").strip()
    return url or None


def backend() -> str:
    # mock | remote  (remote only makes sense once a service URL is set)
    override = os.environ.get("K21_BACKEND", "").strip().lower()
    if override:
        return override
    return "remote" if upload_url() else "mock"


def upload_timeout() -> float:
    return _float_from_env("K21_UPLOAD_TIMEOUT", 120.0)


def max_upload_mb() -> int:
    return _int_from_env("K21_MAX_UPLOAD_MB", 50)


def top_k() -> int:
    k = _int_from_env("K21_TOP_K", 10)
    return k if k >= 1 else 10


def mock_delay_s() -> float:
    return max(0.0, _float_from_env("K21_MOCK_DELAY_S", 1.5))
