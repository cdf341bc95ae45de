"""Linked futurepass information as returned by the futurepass API."""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

__all__ = ["LinkedEoa", "LinkedFuturepassInformation"]


def _field(data: Mapping[str, Any], name: str) -> Any:
    """Look up ``name`` in ``data``, ignoring the case of keys."""
    if name in data:
        return data[name]
    lowered = name.lower()
    for key, value in data.items():
        if isinstance(key, str) and key.lower() == lowered:
            return value
    return None


def _as_str(value: Any, name: str) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    raise ValueError(f"field {name!r} is not a string")


def _as_int(value: Any, name: str, default: int) -> int:
    if value is None:
        return default
    if isinstance(value, bool):
        raise ValueError(f"field {name!r} is not a number")
    if isinstance(value, (int, float)):
        return int(value)
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            raise ValueError(f"field {name!r} is not a number") from None
    raise ValueError(f"field {name!r} is not a number")


def _require_mapping(data: Any) -> Mapping[str, Any]:
    if not isinstance(data, Mapping):
        raise ValueError("expected a JSON object")
    return data


@dataclass
class LinkedEoa:
    """An externally owned account linked to a futurepass."""

    proxy_type: int = 0
    eoa: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "LinkedEoa":
        """Build from a decoded JSON object with ``proxyType`` and ``eoa``."""
        data = _require_mapping(data)
        return cls(
            proxy_type=_as_int(_field(data, "proxyType"), "proxyType", 0),
            eoa=_as_str(_field(data, "eoa"), "eoa"),
        )


def _eoa_list(value: Any, name: str) -> list[LinkedEoa]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise ValueError(f"field {name!r} is not a list")
    return [LinkedEoa.from_dict(item) for item in value]


@dataclass
class LinkedFuturepassInformation:
    """A futurepass with its owner and the accounts linked to it."""

    futurepass: str = ""
    owner_eoa: str = ""
    linked_eoas: list[LinkedEoa] = field(default_factory=list)
    invalid_eoas: list[LinkedEoa] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "LinkedFuturepassInformation":
        """Build from a decoded JSON object; missing fields keep defaults."""
        data = _require_mapping(data)
        return cls(
            futurepass=_as_str(_field(data, "futurepass"), "futurepass"),
            owner_eoa=_as_str(_field(data, "ownerEoa"), "ownerEoa"),
            linked_eoas=_eoa_list(_field(data, "linkedEoas"), "linkedEoas"),
            invalid_eoas=_eoa_list(_field(data, "invalidEoas"), "invalidEoas"),
        )

    @classmethod
    def from_json(cls, text: str) -> "LinkedFuturepassInformation":
        """Parse a JSON document; raises ``ValueError`` if it is malformed."""
        return cls.from_dict(json.loads(text))