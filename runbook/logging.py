from __future__ import annotations

import logging
import os

_FORMAT = "%(asctime)s | %(name)s | %(levelname)s | %(message)s"

_configured = False


def _ensure_base_logger() -> None:
    global _configured
    if _configured:
        return
    level = os.getenv("RUNBOOK_LOG_LEVEL", "WARNING").upper()
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(_FORMAT))
    root = logging.getLogger("runbook")
    root.addHandler(handler)
    root.setLevel(getattr(logging, level, logging.WARNING))
    _configured = True


def get_logger(name: str) -> logging.Logger:
    _ensure_base_logger()
    return logging.getLogger(name)


def set_verbose(verbose: bool) -> None:
    _ensure_base_logger()
    if verbose:
        logging.getLogger("runbook").setLevel(logging.DEBUG)
