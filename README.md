# emergekit

A toolkit for apps that work with Ethereum-style amounts, signed tokens and
the Futureverse, inventory and avatar services. It includes:

- **Unit conversion** between Ether denominations, on decimal strings so no
  precision is lost (`emergekit.units`).
- **SHA-256 hashing** of strings, bytes and files, and of many files in a
  thread pool (`emergekit.hashing`).
- **JWT verification** with HMAC and RSA algorithms and claim checks
  (`emergekit.jwt_verifier`).
- **Service addresses** that depend on environment settings, for Futureverse,
  the inventory service and the avatar service (`emergekit.environment`).
- **Data models** for linked futurepass information (`emergekit.futurepass`)
  and interoperable asset elements (`emergekit.elements`).
- **Clients** for the avatar service (`emergekit.avatars`) and the inventory
  service (`emergekit.inventory`).
- **URL fetching** of raw data and images, with an image cache and GIF
  conversion through a service (`emergekit.fetch`).

## Installation

```
pip install emergekit
```

## Converting units

```python
from emergekit.units import EtherUnit, convert

convert("2", EtherUnit.ETHER, EtherUnit.GWEI, ",")        # "2000000000"
convert("200", EtherUnit.WEI, EtherUnit.GWEI, ",")        # "0,0000002"
convert("8.43092", EtherUnit.ETHER, EtherUnit.WEI, ".")   # "8430920000000000000"
```

The last argument is the decimal separator, used for both the input and the
output. An empty separator raises `ValueError`.

## Hashing

```python
from emergekit.hashing import Sha256Hash, hash_string, hash_files

hash_string("abc")

digest = Sha256Hash()
digest.from_file("asset.bin")      # raises OSError if the file cannot be read
print(digest.hexdigest())

for path, hexdigest in hash_files(["a.txt", "b.txt"], max_workers=4):
    print(path, hexdigest)         # unreadable files get an empty digest
```

`hash_files` returns `(path, digest)` pairs in the order the hashes finish.

## Verifying JWTs

```python
from emergekit.jwt_verifier import JwtVerifier, VerifierAlgorithm

verifier = JwtVerifier()
verifier.init_verifier("secret", VerifierAlgorithm.HS256)
verifier.with_issuer("issuer.example.com")
verifier.set_leeway(30)

if verifier.verify(token):
    claims = verifier.get_claims(token)
```

`verify` returns `True` or `False`. For RSA algorithms the key is a PEM public
key or certificate; a key that cannot be loaded is ignored. `HS512` is checked
as `HS256`. `get_claims` decodes without verifying and returns every claim as
a string.

## Service addresses

```python
from emergekit.environment import PluginSettings, futurepass_api_url, inventory_service_api_url

settings = PluginSettings(shipping=True)
print(futurepass_api_url(settings))
print(inventory_service_api_url(settings))
```

Settings left as `None` take the default for the build type.

## Futurepass and interoperable assets

```python
from emergekit.futurepass import LinkedFuturepassInformation
from emergekit.elements import InteroperableAsset, NFTElement, find_element

info = LinkedFuturepassInformation.from_json(text)
asset = InteroperableAsset.from_json(asset_text)
nft = find_element(asset.elements, NFTElement)
```

## Inventory and avatars

```python
from emergekit.environment import PluginSettings
from emergekit.inventory import inventory_by_owner, organise_inventory_items
from emergekit.avatars import avatar_by_owner

settings = PluginSettings()
address = "0x0000000000000000000000000000000000000000"
items = inventory_by_owner(address, settings)
avatars = avatar_by_owner(address, settings)
combined = organise_inventory_items(items, avatars)
```

Failed requests raise `InventoryServiceError` or `AvatarServiceError`.
`organise_inventory_items` puts items with a matching avatar first, then
those with a name and an image, then those with only an image, then those
with only a name.

## Fetching data and images

```python
from emergekit.fetch import get_data_from_url, TextureFetcher

data = get_data_from_url("https://example.com/file.json")
print(data.text)

fetcher = TextureFetcher(gif_conversion_url="https://example.com/gifTojpeg")
image = fetcher.fetch("https://example.com/picture.png")   # a Pillow image
```

Failures raise `FetchError`.

## What it does not do

- It does not query a service for interoperable assets; `emergekit.elements`
  only reads asset JSON you already have.
- It does not convert GIFs itself: without a `gif_conversion_url`,
  `TextureFetcher.fetch` raises `FetchError` for GIFs.
- It has no command-line tool.

## Running the tests

```
pip install emergekit[test]
pytest
```