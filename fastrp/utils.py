from __future__ import annotations

import logging
from typing import Optional

import numpy as np


def setup_logger(
    logger_name: str = "fastrp",
    level: str = "INFO",
    log_format: Optional[str] = None,
) -> logging.Logger:
    """Attach a stream handler to the named logger.

    Calling this more than once for the same logger only updates its level.
    """
    target = logging.getLogger(logger_name)
    target.setLevel(level)
    if not any(isinstance(h, logging.StreamHandler) for h in target.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(
            logging.Formatter(log_format or "%(asctime)s - %(name)s - %(levelname)s - %(message)s")
        )
        target.addHandler(handler)
    return target


def resolve_positive_int(value: int | str | None, default: int) -> int:
    """Return a positive integer from value or fallback to default."""
    try:
        candidate = int(value)  # type: ignore[arg-type]
        if candidate > 0:
            return candidate
    except (TypeError, ValueError):
        pass
    return default


def l2_normalize(vector: np.ndarray) -> np.ndarray:
    """Scale vector in place to unit length; zero vectors are left unchanged."""
    norm = float(np.sqrt(np.dot(vector, vector)))
    scaling = 1.0 / (1.0 if norm == 0 else norm)
    vector *= scaling
    return vector


def format_bytes(num_bytes: int) -> str:
    """Human readable byte count, e.g. ``'1.5 MiB'``."""
    value = float(num_bytes)
    for unit in ("Bytes", "KiB", "MiB", "GiB", "TiB"):
        if value < 1024 or unit == "TiB":
            if unit == "Bytes":
                return f"{int(value)} {unit}"
            return f"{value:.2f} {unit}"
        value /= 1024
    return f"{value:.2f} TiB"
