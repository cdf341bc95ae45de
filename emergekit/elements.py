"""Elements of interoperable assets and the assets that carry them.

An interoperable asset is an id plus a list of elements. Each element kind
is told apart by its ``ElementName`` in the JSON the asset service returns.
"""

from __future__ import annotations

import json
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any, ClassVar, TypeVar

__all__ = [
    "InteroperableAssetElement",
    "NFTMediaType",
    "NFTAsset",
    "NFTChain",
    "NFTElement",
    "AvatarElement",
    "Thumbnail",
    "ThumbnailsElement",
    "InteroperableAsset",
    "element_from_dict",
    "find_element",
]


def _field(data: Mapping[str, Any], name: str) -> Any:
    """Look up ``name`` in ``data``, ignoring the case of keys."""
    if name in data:
        return data[name]
    lowered = name.lower()
    for key, value in data.items():
        if isinstance(key, str) and key.lower() == lowered:
            return value
    return None


def _require_mapping(data: Any, what: str = "element") -> Mapping[str, Any]:
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


def _as_int(value: Any, name: str) -> int:
    if value is None:
        return 0
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


def _as_bool(value: Any, name: str) -> bool:
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    raise ValueError(f"field {name!r} is not a boolean")


def _as_list(value: Any, name: str) -> list[Any]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise ValueError(f"field {name!r} is not a list")
    return value


class InteroperableAssetElement:
    """Base of every element kind; ``element_name`` identifies the kind."""

    element_name: ClassVar[str] = ""


@dataclass
class NFTMediaType:
    """Media type of an NFT asset."""

    type: str = ""
    element: str = ""

    @classmethod
    def _from_dict(cls, data: Any) -> "NFTMediaType":
        data = _require_mapping(data, "MediaType")
        return cls(
            type=_as_str(_field(data, "Type"), "Type"),
            element=_as_str(_field(data, "Element"), "Element"),
        )


@dataclass
class NFTAsset:
    """One asset file belonging to an NFT."""

    media_type: NFTMediaType = field(default_factory=NFTMediaType)
    asset_location: str = ""

    @classmethod
    def _from_dict(cls, data: Any) -> "NFTAsset":
        data = _require_mapping(data, "asset")
        media = _field(data, "MediaType")
        return cls(
            media_type=NFTMediaType() if media is None else NFTMediaType._from_dict(media),
            asset_location=_as_str(_field(data, "AssetLocation"), "AssetLocation"),
        )


@dataclass
class NFTChain:
    """The chain an NFT lives on."""

    is_testnet: bool = False
    chain_name: str = ""

    @classmethod
    def _from_dict(cls, data: Any) -> "NFTChain":
        data = _require_mapping(data, "Chain")
        return cls(
            is_testnet=_as_bool(_field(data, "IsTestnet"), "IsTestnet"),
            chain_name=_as_str(_field(data, "ChainName"), "ChainName"),
        )


def _attributes(value: Any) -> dict[str, str]:
    if value is None:
        return {}
    value = _require_mapping(value, "Attributes")
    return {str(key): _as_str(item, str(key)) for key, item in value.items()}


@dataclass
class NFTElement(InteroperableAssetElement):
    """Element describing the NFT behind an asset."""

    element_name: ClassVar[str] = "NFT"

    address: str = ""
    nft_name: str = ""
    description: str = ""
    attributes: dict[str, str] = field(default_factory=dict)
    chain: NFTChain = field(default_factory=NFTChain)
    token_number: str = ""
    token_type: int = 0
    collection_name: str = ""
    primary_asset: int = 0
    creator: str = ""
    owner: str = ""
    assets: list[NFTAsset] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "NFTElement":
        """Build from a decoded JSON element object."""
        data = _require_mapping(data)
        chain = _field(data, "Chain")
        return cls(
            address=_as_str(_field(data, "Address"), "Address"),
            nft_name=_as_str(_field(data, "NFTName"), "NFTName"),
            description=_as_str(_field(data, "Description"), "Description"),
            attributes=_attributes(_field(data, "Attributes")),
            chain=NFTChain() if chain is None else NFTChain._from_dict(chain),
            token_number=_as_str(_field(data, "TokenNumber"), "TokenNumber"),
            token_type=_as_int(_field(data, "TokenType"), "TokenType"),
            collection_name=_as_str(_field(data, "CollectionName"), "CollectionName"),
            primary_asset=_as_int(_field(data, "PrimaryAsset"), "PrimaryAsset"),
            creator=_as_str(_field(data, "Creator"), "Creator"),
            owner=_as_str(_field(data, "Owner"), "Owner"),
            assets=[
                NFTAsset._from_dict(item)
                for item in _as_list(_field(data, "Assets"), "Assets")
            ],
        )


@dataclass
class AvatarElement(InteroperableAssetElement):
    """Element marking an asset as usable as an avatar."""

    element_name: ClassVar[str] = "avatar"

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "AvatarElement":
        """Build from a decoded JSON element object."""
        _require_mapping(data)
        return cls()


@dataclass
class Thumbnail:
    """One thumbnail image of an asset."""

    id: str = ""
    url: str = ""
    width: int = 0
    height: int = 0
    crop_style: int = 0
    file_format: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Thumbnail":
        """Build from a decoded JSON thumbnail object."""
        data = _require_mapping(data, "thumbnail")
        return cls(
            id=_as_str(_field(data, "Id"), "Id"),
            url=_as_str(_field(data, "Url"), "Url"),
            width=_as_int(_field(data, "Width"), "Width"),
            height=_as_int(_field(data, "Height"), "Height"),
            crop_style=_as_int(_field(data, "CropStyle"), "CropStyle"),
            file_format=_as_str(_field(data, "FileFormat"), "FileFormat"),
        )


def _thumbnail(value: Any) -> Thumbnail:
    return Thumbnail() if value is None else Thumbnail.from_dict(value)


@dataclass
class ThumbnailsElement(InteroperableAssetElement):
    """Element holding the thumbnails of an asset."""

    element_name: ClassVar[str] = "thumbnails"

    small_thumbnail: Thumbnail = field(default_factory=Thumbnail)
    large_thumbnail: Thumbnail = field(default_factory=Thumbnail)
    other_thumbnails: list[Thumbnail] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ThumbnailsElement":
        """Build from a decoded JSON element object."""
        data = _require_mapping(data)
        return cls(
            small_thumbnail=_thumbnail(_field(data, "SmallThumbnail")),
            large_thumbnail=_thumbnail(_field(data, "LargeThumbnail")),
            other_thumbnails=[
                Thumbnail.from_dict(item)
                for item in _as_list(_field(data, "OtherThumbnails"), "OtherThumbnails")
            ],
        )


_ELEMENT_KINDS: dict[str, Any] = {
    kind.element_name: kind for kind in (NFTElement, AvatarElement, ThumbnailsElement)
}


def element_from_dict(data: Mapping[str, Any]) -> InteroperableAssetElement | None:
    """Build the element named by ``ElementName``; ``None`` for unknown kinds."""
    data = _require_mapping(data)
    name = _as_str(_field(data, "ElementName"), "ElementName")
    kind = _ELEMENT_KINDS.get(name)
    return None if kind is None else kind.from_dict(data)


@dataclass
class InteroperableAsset:
    """An asset id with the elements known about it."""

    id: str = ""
    elements: list[InteroperableAssetElement] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "InteroperableAsset":
        """Build from a decoded JSON object; unknown element kinds are skipped."""
        data = _require_mapping(data, "asset")
        elements = []
        for item in _as_list(_field(data, "Elements"), "Elements"):
            element = element_from_dict(item)
            if element is not None:
                elements.append(element)
        return cls(id=_as_str(_field(data, "Id"), "Id"), elements=elements)

    @classmethod
    def from_json(cls, text: str) -> "InteroperableAsset":
        """Parse a JSON document; raises ``ValueError`` if it is malformed."""
        return cls.from_dict(json.loads(text))


_E = TypeVar("_E", bound=InteroperableAssetElement)


def find_element(
    elements: Iterable[InteroperableAssetElement], element_class: type[_E]
) -> _E | None:
    """Return the first element whose class is exactly ``element_class``."""
    return next(
        (element for element in elements if type(element) is element_class), None
    )