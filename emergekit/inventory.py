"""Client for the inventory service and helpers for presenting inventories."""

from __future__ import annotations

import sys
from collections.abc import Iterable, Iterator, Mapping
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any

import requests

from emergekit.avatars import AvatarResult
from emergekit.environment import (
    PluginSettings,
    inventory_service_api_url,
    inventory_service_host,
)

__all__ = [
    "InventoryServiceError",
    "InventoryContent",
    "InventoryMeta",
    "InventoryItem",
    "CombinedInventoryItem",
    "best_display_image",
    "organise_inventory_items",
    "inventory_by_owner",
]

DEFAULT_NETWORKS = "ETHEREUM,POLYGON,FLOW,TEZOS,SOLANA,IMMUTABLEX"
_TIMEOUT = 60.0


class InventoryServiceError(Exception):
    """The inventory service could not be reached or gave an unusable answer."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


def _field(data: Mapping[str, Any], name: str) -> Any:
    """Look up ``name`` in ``data``, ignoring the case of keys."""
    if name in data:
        return data[name]
    lowered = name.lower()
    for key, value in data.items():
        if isinstance(key, str) and key.lower() == lowered:
            return value
    return None


def _require_mapping(data: Any, what: str) -> Mapping[str, Any]:
    if not isinstance(data, Mapping):
        raise ValueError(f"expected a JSON object for {what}")
    return data


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


def _as_list(value: Any, name: str) -> list[Any]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise ValueError(f"field {name!r} is not a list")
    return value


@dataclass
class InventoryContent:
    """One piece of media attached to an inventory item."""

    url: str = ""
    mime_type: str = ""

    @classmethod
    def _from_dict(cls, data: Any) -> "InventoryContent":
        data = _require_mapping(data, "content")
        return cls(
            url=_as_str(_field(data, "url"), "url"),
            mime_type=_as_str(_field(data, "mimeType"), "mimeType"),
        )


@dataclass
class InventoryMeta:
    """Descriptive metadata of an inventory item."""

    name: str = ""
    description: str = ""
    content: list[InventoryContent] = field(default_factory=list)

    @classmethod
    def _from_dict(cls, data: Any) -> "InventoryMeta":
        data = _require_mapping(data, "meta")
        return cls(
            name=_as_str(_field(data, "name"), "name"),
            description=_as_str(_field(data, "description"), "description"),
            content=[
                InventoryContent._from_dict(item)
                for item in _as_list(_field(data, "content"), "content")
            ],
        )


@dataclass
class InventoryItem:
    """A token owned by an address.

    ``original_data`` keeps the item's JSON object exactly as received.
    """

    id: str = ""
    blockchain: str = ""
    contract: str = ""
    token_id: str = ""
    meta: InventoryMeta = field(default_factory=InventoryMeta)
    original_data: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "InventoryItem":
        """Build from a decoded JSON object; missing fields keep defaults."""
        data = _require_mapping(data, "inventory item")
        meta = _field(data, "meta")
        return cls(
            id=_as_str(_field(data, "id"), "id"),
            blockchain=_as_str(_field(data, "blockchain"), "blockchain"),
            contract=_as_str(_field(data, "contract"), "contract"),
            token_id=_as_str(_field(data, "tokenId"), "tokenId"),
            meta=InventoryMeta() if meta is None else InventoryMeta._from_dict(meta),
            original_data=dict(data),
        )


@dataclass
class CombinedInventoryItem:
    """An inventory item paired with the avatar made from it, if any."""

    inventory_item: InventoryItem = field(default_factory=InventoryItem)
    avatar_item: AvatarResult = field(default_factory=AvatarResult)
    has_matching_avatar: bool = False


def _gif_default(allow_gif: bool | None) -> bool:
    return sys.platform == "win32" if allow_gif is None else allow_gif


def best_display_image(
    contents: Iterable[InventoryContent], allow_gif: bool | None = None
) -> str:
    """Return the URL of the best image: PNG, then the last JPEG, then a GIF.

    GIFs count only when ``allow_gif`` is true; it defaults to whether the
    platform is Windows. Returns "" if nothing suitable is found.
    """
    allow_gif = _gif_default(allow_gif)
    best = ""
    for content in contents:
        if content.mime_type == "image/png":
            return content.url
        if content.mime_type == "image/jpeg":
            best = content.url
        elif allow_gif and content.mime_type == "image/gif" and best == "":
            best = content.url
    return best


def _contract_key(chain: str, contract: str) -> str:
    return chain.upper() + ":" + contract


def organise_inventory_items(
    items: Iterable[InventoryItem],
    avatars: Iterable[AvatarResult],
    allow_gif: bool | None = None,
) -> list[CombinedInventoryItem]:
    """Pair items with matching avatars and order them for display.

    Items with neither a name nor any content are dropped. The rest come in
    this order: those with a matching avatar, those with a name and an image,
    those with only an image, and those with only a name.
    """
    allow_gif = _gif_default(allow_gif)
    avatars = list(avatars)
    with_avatars: list[CombinedInventoryItem] = []
    with_names_and_images: list[CombinedInventoryItem] = []
    with_images: list[CombinedInventoryItem] = []
    with_names: list[CombinedInventoryItem] = []

    for item in items:
        if item.meta.name == "" and not item.meta.content:
            continue
        key = _contract_key(item.blockchain, item.contract)
        avatar = next(
            (a for a in avatars if _contract_key(a.chain, a.contract_address) == key),
            None,
        )
        if avatar is not None:
            with_avatars.append(
                CombinedInventoryItem(
                    inventory_item=item, avatar_item=avatar, has_matching_avatar=True
                )
            )
            continue
        combined = CombinedInventoryItem(inventory_item=item)
        has_image = best_display_image(item.meta.content, allow_gif) != ""
        if item.meta.name != "" and has_image:
            with_names_and_images.append(combined)
        elif has_image:
            with_images.append(combined)
        else:
            with_names.append(combined)

    return with_avatars + with_names_and_images + with_images + with_names


@contextmanager
def _session_scope(session: requests.Session | None) -> Iterator[requests.Session]:
    if session is not None:
        yield session
        return
    with requests.Session() as own:
        yield own


def inventory_by_owner(
    address: str,
    settings: PluginSettings | None = None,
    network: str = DEFAULT_NETWORKS,
    session: requests.Session | None = None,
) -> list[InventoryItem]:
    """Fetch the tokens owned by ``address`` on the comma-separated networks."""
    url = (
        inventory_service_api_url(settings)
        + "byOwner?address="
        + address
        + "&network="
        + network
    )
    headers = {"Host": inventory_service_host(settings)}
    with _session_scope(session) as http:
        try:
            response = http.get(url, headers=headers, timeout=_TIMEOUT)
        except requests.RequestException as exc:
            raise InventoryServiceError(f"request to {url} failed: {exc}") from exc
    if not response.ok:
        raise InventoryServiceError(
            f"request to {url} returned {response.status_code}",
            status_code=response.status_code,
        )
    try:
        payload = response.json()
    except ValueError as exc:
        raise InventoryServiceError(
            "response is not valid JSON", status_code=response.status_code
        ) from exc
    if not isinstance(payload, Mapping) or "message" not in payload:
        raise InventoryServiceError("response has no 'message' field")
    try:
        message = _require_mapping(payload["message"], "message")
        return [
            InventoryItem.from_dict(item)
            for item in _as_list(_field(message, "items"), "items")
        ]
    except ValueError as exc:
        raise InventoryServiceError(f"could not parse inventory: {exc}") from exc