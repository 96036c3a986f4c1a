from __future__ import annotations

import importlib
import logging
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.school_billing.school_billing.container import Container, build_container


def settings_container() -> tuple[object, Container]:
    """Settings module and a container on the configured store backend."""

    settings = importlib.import_module(get_settings_module())
    logging.basicConfig(level=getattr(logging, str(getattr(settings, "LOG_LEVEL", "INFO")).upper(), logging.INFO))
    container = build_container(
        backend=getattr(settings, "STORE_BACKEND", "memory"),
        db_config=dict(settings.DB_CONFIG),
    )
    return settings, container
