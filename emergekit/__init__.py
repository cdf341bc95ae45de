"""Ether unit conversion, hashing, JWT verification and service clients for wallet-connected apps."""

__version__ = "0.1.0"
__all__ = [
    "units",
    "hashing",
    "jwt_verifier",
    "environment",
    "futurepass",
    "elements",
    "avatars",
    "inventory",
    "fetch",
]