"""Response envelope serialization."""

from __future__ import annotations

import json
from dataclasses import asdict
from dataclasses import is_dataclass
from datetime import date
from datetime import datetime
from datetime import time
from decimal import Decimal
from enum import Enum
from typing import Any
from uuid import UUID

from pydantic import BaseModel

from apihelpers.exceptions import SerializationError
from apihelpers.utils.logging import get_logger

logger = get_logger(__name__)


class Envelope(dict[str, Any]):
    """Ordered mapping of top-level response keys to payloads.

    Keys are written out in insertion order, e.g.
    ``Envelope(organization=org, total=3).marshal()``.
    """

    def marshal(self) -> bytes:
        """Encode the envelope as compact UTF-8 JSON.

        Raises:
            SerializationError: If a value cannot be represented in JSON.
        """
        try:
            encoded = json.dumps(
                self,
                default=_encode_value,
                allow_nan=False,
                ensure_ascii=False,
                separators=(",", ":"),
            )
        except (TypeError, ValueError) as exc:
            logger.warning("Failed to marshal response envelope", extra={"keys": list(self)})
            raise SerializationError("response is not JSON serializable", detail=str(exc)) from exc
        return encoded.encode("utf-8")


def _encode_value(value: Any) -> Any:
    """Convert values the json module does not handle natively."""
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    if is_dataclass(value) and not isinstance(value, type):
        return asdict(value)
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    if isinstance(value, (UUID, Decimal)):
        return str(value)
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (set, frozenset, tuple)):
        return list(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")
