"""Error logging that tags every logged error with a fresh identifier."""

from __future__ import annotations

import logging
import uuid
from collections.abc import Mapping
from typing import Any

logger = logging.getLogger(__name__)


def log_error(err: BaseException | None, fields: Mapping[str, Any] | None) -> str:
    """Log ``err`` with ``fields`` under a new identifier and return that identifier."""
    error_id = str(uuid.uuid4())
    record = {**(fields or {}), "id": error_id}
    logger.error(
        "Error occurred",
        extra={
            "error_fields": record,
            "error_detail": None if err is None else str(err),
        },
    )
    return error_id