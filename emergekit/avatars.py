"""Client for the avatar service: avatars by id and avatars by owner."""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from dataclasses import dataclass, field, replace
from typing import Any

import requests

from emergekit.environment import (
    PluginSettings,
    avatar_service_api_url,
    avatar_service_host,
)

__all__ = [
    "AvatarServiceError",
    "AvatarMetadata",
    "AvatarResult",
    "AvatarData",
    "parse_avatar_by_id",
    "avatar_by_id",
    "avatar_by_owner",
]

logger = logging.getLogger(__name__)

_TIMEOUT = 60.0


class AvatarServiceError(Exception):
    """The avatar service could not be reached or gave an unusable answer."""

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


def _as_list(value: Any, name: str) -> list[Any]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise ValueError(f"field {name!r} is not a list")
    return value


@dataclass
class AvatarMetadata:
    """Description of one avatar model."""

    name: str = ""
    creator: str = ""
    type: str = ""
    uri_base: str = ""
    max_total_size: int = -1
    max_total_vertices: int = -1
    guid: str = ""
    material_type: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "AvatarMetadata":
        """Build from a decoded JSON object; missing fields keep defaults."""
        data = _require_mapping(data, "avatar metadata")
        return cls(
            name=_as_str(_field(data, "Name"), "Name"),
            creator=_as_str(_field(data, "Creator"), "Creator"),
            type=_as_str(_field(data, "Type"), "Type"),
            uri_base=_as_str(_field(data, "UriBase"), "UriBase"),
            max_total_size=_as_int(_field(data, "MaxTotalSize"), "MaxTotalSize", -1),
            max_total_vertices=_as_int(
                _field(data, "MaxTotalVertices"), "MaxTotalVertices", -1
            ),
            guid=_as_str(_field(data, "GUID"), "GUID"),
            material_type=_as_str(_field(data, "MaterialType"), "MaterialType"),
        )


@dataclass
class AvatarResult:
    """An avatar NFT as listed by the avatar service.

    ``meta`` is the token's metadata object as decoded JSON.
    """

    avatar_id: str = ""
    contract_address: str = ""
    token_id: str = ""
    token_uri: str = ""
    avatars: list[AvatarMetadata] = field(default_factory=list)
    last_updated: int = -1
    chain: str = ""
    meta: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "AvatarResult":
        """Build from a decoded JSON object; missing fields keep defaults.

        A ``tokenURI`` given as a list is read as the avatars' metadata.
        """
        data = _require_mapping(data, "avatar result")
        token_uri = _field(data, "tokenURI")
        if isinstance(token_uri, list):
            avatar_items = token_uri
            token_uri = None
        else:
            avatar_items = _as_list(_field(data, "Avatars"), "Avatars")
        meta = _field(data, "meta")
        return cls(
            avatar_id=_as_str(_field(data, "avatarId"), "avatarId"),
            contract_address=_as_str(_field(data, "contractAddress"), "contractAddress"),
            token_id=_as_str(_field(data, "tokenId"), "tokenId"),
            token_uri=_as_str(token_uri, "tokenURI"),
            avatars=[AvatarMetadata.from_dict(item) for item in avatar_items],
            last_updated=_as_int(_field(data, "lastUpdated"), "lastUpdated", -1),
            chain=_as_str(_field(data, "chain"), "chain"),
            meta={} if meta is None else dict(_require_mapping(meta, "meta")),
        )


@dataclass
class AvatarData:
    """An avatar NFT together with the metadata of its avatar."""

    avatar_nft: AvatarResult = field(default_factory=AvatarResult)
    avatar: AvatarMetadata = field(default_factory=AvatarMetadata)


def _message(payload: Any) -> Any:
    if not isinstance(payload, Mapping) or "message" not in payload:
        raise AvatarServiceError("response has no 'message' field")
    return payload["message"]


def parse_avatar_by_id(payload: Any) -> AvatarData:
    """Read an avatar-by-id response; both parts come from ``message``."""
    message = _message(payload)
    try:
        return AvatarData(
            avatar_nft=AvatarResult.from_dict(message),
            avatar=AvatarMetadata.from_dict(message),
        )
    except ValueError as exc:
        raise AvatarServiceError(f"could not parse avatar: {exc}") from exc


@contextmanager
def _session_scope(session: requests.Session | None) -> Iterator[requests.Session]:
    if session is not None:
        yield session
        return
    with requests.Session() as own:
        yield own


def _get_json(
    session: requests.Session, url: str, headers: Mapping[str, str] | None = None
) -> Any:
    try:
        response = session.get(url, headers=dict(headers or {}), timeout=_TIMEOUT)
    except requests.RequestException as exc:
        raise AvatarServiceError(f"request to {url} failed: {exc}") from exc
    if not response.ok:
        raise AvatarServiceError(
            f"request to {url} returned {response.status_code}",
            status_code=response.status_code,
        )
    try:
        return response.json()
    except ValueError as exc:
        raise AvatarServiceError(
            f"response from {url} is not valid JSON", status_code=response.status_code
        ) from exc


def avatar_by_id(
    avatar_id: str,
    settings: PluginSettings | None = None,
    session: requests.Session | None = None,
) -> AvatarData:
    """Fetch the avatar with the given id from the avatar service."""
    url = avatar_service_api_url(settings) + "id?id=" + avatar_id
    headers = {"Host": avatar_service_host(settings)}
    with _session_scope(session) as http:
        payload = _get_json(http, url, headers)
    return parse_avatar_by_id(payload)


def _fetch_metadata(session: requests.Session, result: AvatarResult) -> AvatarResult:
    try:
        items = _get_json(session, result.token_uri)
        avatars = [AvatarMetadata.from_dict(item) for item in _as_list(items, "metadata")]
    except (AvatarServiceError, ValueError) as exc:
        logger.warning("Could not read avatar metadata from %s: %s", result.token_uri, exc)
        return result
    return replace(result, avatars=avatars)


def avatar_by_owner(
    address: str,
    settings: PluginSettings | None = None,
    session: requests.Session | None = None,
) -> list[AvatarResult]:
    """Fetch every avatar owned by ``address``, with each avatar's metadata.

    The metadata is read from each result's token URI. Results with a blank
    token URI are returned as listed; a metadata document that cannot be
    fetched or read leaves that result's avatars as listed.
    """
    url = avatar_service_api_url(settings) + "byOwner?address=" + address
    headers = {"Host": avatar_service_host(settings)}
    with _session_scope(session) as http:
        message = _message(_get_json(http, url, headers))
        if not isinstance(message, list):
            raise AvatarServiceError("'message' is not a list")
        try:
            listed = [AvatarResult.from_dict(item) for item in message]
        except ValueError as exc:
            raise AvatarServiceError(f"could not parse avatars: {exc}") from exc

        results = []
        for result in listed:
            if result.token_uri:
                results.append(_fetch_metadata(http, result))
            else:
                logger.warning("An avatar's tokenURI was blank, not fetching its metadata.")
                results.append(result)
        return results