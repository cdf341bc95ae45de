import json

import pytest

from emergekit.elements import (
    AvatarElement,
    InteroperableAsset,
    InteroperableAssetElement,
    NFTAsset,
    NFTChain,
    NFTElement,
    NFTMediaType,
    Thumbnail,
    ThumbnailsElement,
    element_from_dict,
    find_element,
)

NFT_DATA = {
    "ElementName": "NFT",
    "Address": "0xabc",
    "NFTName": "Sample Token",
    "Description": "A sample",
    "Attributes": {"Colour": "red", "Level": 5, "Rare": True},
    "Chain": {"IsTestnet": True, "ChainName": "SEPOLIA"},
    "TokenNumber": "42",
    "TokenType": 1,
    "CollectionName": "Samples",
    "PrimaryAsset": 0,
    "Creator": "0xcreator",
    "Owner": "0xowner",
    "Assets": [
        {
            "MediaType": {"Type": "image", "Element": "png"},
            "AssetLocation": "https://assets.example.com/a.png",
        }
    ],
}

THUMBS_DATA = {
    "ElementName": "thumbnails",
    "SmallThumbnail": {
        "Id": "s",
        "Url": "https://assets.example.com/s.png",
        "Width": 64,
        "Height": 32,
        "CropStyle": 1,
        "FileFormat": "png",
    },
    "LargeThumbnail": {"Id": "l", "Url": "https://assets.example.com/l.png"},
    "OtherThumbnails": [{"Id": "o1"}, {"Id": "o2"}],
}


def test_element_names():
    assert NFTElement.element_name == "NFT"
    assert AvatarElement().element_name == "avatar"
    assert ThumbnailsElement.element_name == "thumbnails"


def test_nft_element_from_dict():
    element = NFTElement.from_dict(NFT_DATA)
    assert element.address == "0xabc"
    assert element.nft_name == "Sample Token"
    assert element.chain == NFTChain(is_testnet=True, chain_name="SEPOLIA")
    assert element.token_number == "42"
    assert element.token_type == 1
    assert element.owner == "0xowner"
    assert element.assets == [
        NFTAsset(
            media_type=NFTMediaType(type="image", element="png"),
            asset_location="https://assets.example.com/a.png",
        )
    ]


def test_nft_attributes_are_strings():
    element = NFTElement.from_dict(NFT_DATA)
    assert element.attributes["Colour"] == "red"
    assert element.attributes["Level"] == "5"
    assert element.attributes["Rare"] == "true"
    assert set(element.attributes) == {"Colour", "Level", "Rare"}


def test_nft_missing_fields_default():
    element = NFTElement.from_dict({"ElementName": "NFT"})
    assert element == NFTElement()
    assert element.attributes == {}
    assert element.assets == []


def test_keys_match_ignoring_case():
    element = NFTElement.from_dict({"address": "0xdef", "nftname": "x"})
    assert element.address == "0xdef"
    assert element.nft_name == "x"


def test_nft_bad_types_raise():
    with pytest.raises(ValueError):
        NFTElement.from_dict({"TokenType": "many"})
    with pytest.raises(ValueError):
        NFTElement.from_dict({"Assets": "none"})
    with pytest.raises(ValueError):
        NFTElement.from_dict(["not", "a", "mapping"])


def test_thumbnails_from_dict():
    element = ThumbnailsElement.from_dict(THUMBS_DATA)
    assert element.small_thumbnail == Thumbnail(
        id="s",
        url="https://assets.example.com/s.png",
        width=64,
        height=32,
        crop_style=1,
        file_format="png",
    )
    assert element.large_thumbnail.id == "l"
    assert element.large_thumbnail.width == 0
    assert [t.id for t in element.other_thumbnails] == ["o1", "o2"]


def test_element_from_dict_dispatch():
    assert isinstance(element_from_dict(NFT_DATA), NFTElement)
    assert isinstance(element_from_dict({"ElementName": "avatar"}), AvatarElement)
    assert isinstance(element_from_dict(THUMBS_DATA), ThumbnailsElement)
    assert element_from_dict({"ElementName": "unknown"}) is None
    assert element_from_dict({}) is None


def test_element_names_are_case_sensitive():
    assert element_from_dict({"ElementName": "nft"}) is None


def test_interoperable_asset_from_json():
    document = json.dumps(
        {
            "Id": "asset-1",
            "Elements": [
                NFT_DATA,
                {"ElementName": "avatar"},
                {"ElementName": "mystery"},
                THUMBS_DATA,
            ],
        }
    )
    asset = InteroperableAsset.from_json(document)
    assert asset.id == "asset-1"
    assert [type(e) for e in asset.elements] == [
        NFTElement,
        AvatarElement,
        ThumbnailsElement,
    ]
    assert asset.elements[0] == NFTElement.from_dict(NFT_DATA)


def test_interoperable_asset_without_elements():
    asset = InteroperableAsset.from_dict({"Id": "lonely"})
    assert asset == InteroperableAsset(id="lonely", elements=[])


def test_interoperable_asset_malformed_json():
    with pytest.raises(ValueError):
        InteroperableAsset.from_json("{not json")
    with pytest.raises(ValueError):
        InteroperableAsset.from_json("[1, 2]")
    with pytest.raises(ValueError):
        InteroperableAsset.from_dict({"Elements": [1]})


def test_find_element_exact_class():
    nft = NFTElement(address="0x1")
    avatar = AvatarElement()
    elements = [avatar, nft, NFTElement(address="0x2")]
    assert find_element(elements, NFTElement) is nft
    assert find_element(elements, AvatarElement) is avatar
    assert find_element(elements, ThumbnailsElement) is None


def test_find_element_ignores_subclasses():
    class SpecialNFT(NFTElement):
        pass

    special = SpecialNFT()
    assert find_element([special], NFTElement) is None
    assert find_element([special], SpecialNFT) is special
    assert find_element([special], InteroperableAssetElement) is None


def test_find_element_empty():
    assert find_element([], NFTElement) is None