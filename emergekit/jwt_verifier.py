"""Verification of JSON Web Tokens and extraction of their claims."""

from __future__ import annotations

import json
import logging
import time
from enum import Enum
from typing import Any, Callable

import jwt
from cryptography import x509
from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric.rsa import RSAPublicKey

__all__ = ["VerifierAlgorithm", "JwtVerifier"]

logger = logging.getLogger(__name__)

_CERTIFICATE_MARKER = "-----BEGIN CERTIFICATE-----"

_DISABLED_CHECKS = {
    "verify_exp": False,
    "verify_nbf": False,
    "verify_iat": False,
    "verify_aud": False,
    "verify_iss": False,
    "verify_sub": False,
    "verify_jti": False,
}


class VerifierAlgorithm(Enum):
    """Signature algorithms a verifier can be set up for."""

    HS256 = "HS256"
    HS384 = "HS384"
    HS512 = "HS512"
    RS256 = "RS256"
    RS384 = "RS384"
    RS512 = "RS512"


# HS512 is registered as an HS256 verifier, as the verifier has always done.
_SIGNING_ALGORITHM = {
    VerifierAlgorithm.HS256: "HS256",
    VerifierAlgorithm.HS384: "HS384",
    VerifierAlgorithm.HS512: "HS256",
    VerifierAlgorithm.RS256: "RS256",
    VerifierAlgorithm.RS384: "RS384",
    VerifierAlgorithm.RS512: "RS512",
}


def _load_rsa_public_key(pem: str) -> RSAPublicKey:
    data = pem.encode("utf-8")
    if _CERTIFICATE_MARKER in pem:
        public_key = x509.load_pem_x509_certificate(data).public_key()
    else:
        public_key = serialization.load_pem_public_key(data)
    if not isinstance(public_key, RSAPublicKey):
        raise TypeError("key is not an RSA public key")
    return public_key


def _numeric_claim(payload: dict[str, Any], name: str) -> float | None:
    if name not in payload:
        return None
    value = payload[name]
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise jwt.InvalidTokenError(f"claim {name!r} is not a number")
    return value


def _audiences(value: Any) -> set[str]:
    if isinstance(value, str):
        return {value}
    if isinstance(value, list) and all(isinstance(item, str) for item in value):
        return set(value)
    raise jwt.InvalidAudienceError("audience claim has the wrong type")


def _trim_quotes(text: str) -> str:
    if text.startswith('"'):
        text = text[1:]
    if text.endswith('"'):
        text = text[:-1]
    return text


class JwtVerifier:
    """Checks token signatures and the claims a token is expected to carry.

    ``clock`` returns the current time in seconds since the epoch.
    """

    def __init__(self, clock: Callable[[], float] = time.time) -> None:
        self._keys: dict[str, Any] = {}
        self._expected: dict[str, Any] = {}
        self._leeway = 0
        self._clock = clock

    def init_verifier(self, key: str, algorithm: VerifierAlgorithm) -> "JwtVerifier":
        """Allow tokens signed with ``algorithm`` and checked against ``key``.

        For RSA algorithms ``key`` is a PEM public key or certificate. A key
        that cannot be loaded is ignored and the algorithm is not allowed.
        """
        name = _SIGNING_ALGORITHM[VerifierAlgorithm(algorithm)]
        if name.startswith("RS"):
            try:
                verifying_key: Any = _load_rsa_public_key(key)
            except (ValueError, TypeError, UnsupportedAlgorithm) as exc:
                logger.warning("Could not load %s key: %s", name, exc)
                return self
        else:
            verifying_key = key
        self._keys[name] = verifying_key
        return self

    def with_issuer(self, issuer: str) -> "JwtVerifier":
        """Require the ``iss`` claim to equal ``issuer``."""
        self._expected["iss"] = issuer
        return self

    def with_subject(self, subject: str) -> "JwtVerifier":
        """Require the ``sub`` claim to equal ``subject``."""
        self._expected["sub"] = subject
        return self

    def with_audience(self, audience: str) -> "JwtVerifier":
        """Require ``audience`` to be among the token's audiences."""
        self._expected["aud"] = audience
        return self

    def set_leeway(self, leeway: int) -> "JwtVerifier":
        """Allow ``leeway`` seconds of clock skew on time claims."""
        if leeway < 0:
            raise ValueError("leeway must not be negative")
        self._leeway = int(leeway)
        return self

    def with_id(self, jwt_id: str) -> "JwtVerifier":
        """Require the ``jti`` claim to equal ``jwt_id``."""
        self._expected["jti"] = jwt_id
        return self

    def with_custom_claim(self, name: str, value: Any) -> "JwtVerifier":
        """Require the claim ``name`` to equal ``value``."""
        self._expected[name] = value
        return self

    def verify(self, token: str) -> bool:
        """Return whether ``token`` has a valid signature and expected claims."""
        try:
            self._verify(token)
        except (jwt.PyJWTError, ValueError, TypeError) as exc:
            logger.error("JWT verification failed: %s", exc)
            return False
        return True

    def _verify(self, token: str) -> None:
        header = jwt.get_unverified_header(token)
        algorithm = header.get("alg")
        key = self._keys.get(algorithm) if isinstance(algorithm, str) else None
        if key is None:
            raise jwt.InvalidAlgorithmError("wrong algorithm")

        payload = jwt.decode(
            token,
            key,
            algorithms=[algorithm],
            options={"verify_signature": True, **_DISABLED_CHECKS},
        )

        now = int(self._clock())
        expires = _numeric_claim(payload, "exp")
        if expires is not None and now > expires + self._leeway:
            raise jwt.ExpiredSignatureError("token expired")
        issued = _numeric_claim(payload, "iat")
        if issued is not None and now < issued - self._leeway:
            raise jwt.ImmatureSignatureError("token issued in the future")
        not_before = _numeric_claim(payload, "nbf")
        if not_before is not None and now < not_before - self._leeway:
            raise jwt.ImmatureSignatureError("token not yet valid")

        for name, expected in self._expected.items():
            if name not in payload:
                raise jwt.MissingRequiredClaimError(name)
            actual = payload[name]
            if name == "aud":
                if expected not in _audiences(actual):
                    raise jwt.InvalidAudienceError("audience mismatch")
            elif type(actual) is not type(expected) or actual != expected:
                raise jwt.InvalidTokenError(f"claim {name!r} does not match")

    def get_claims(self, token: str) -> dict[str, str]:
        """Return the token's payload claims as strings, without verifying it.

        String claims come back without their quotes; other values as compact
        JSON. A token that cannot be decoded gives an empty mapping.
        """
        if not token:
            return {}
        try:
            payload = jwt.decode(
                token, options={"verify_signature": False, **_DISABLED_CHECKS}
            )
        except (jwt.PyJWTError, ValueError, TypeError):
            return {}
        return {
            name: _trim_quotes(
                json.dumps(value, ensure_ascii=False, separators=(",", ":"))
            )
            for name, value in payload.items()
        }