import jwt
import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

from emergekit.jwt_verifier import JwtVerifier, VerifierAlgorithm

SECRET = "secret"
NOW = 1_000_000


def fixed_clock():
    return NOW


def hs_token(payload, algorithm="HS256", key=SECRET):
    return jwt.encode(payload, key, algorithm=algorithm)


@pytest.fixture
def verifier():
    return JwtVerifier(clock=fixed_clock).init_verifier(SECRET, VerifierAlgorithm.HS256)


@pytest.fixture(scope="module")
def rsa_private_key():
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


def public_pem(private_key):
    return (
        private_key.public_key()
        .public_bytes(
            serialization.Encoding.PEM,
            serialization.PublicFormat.SubjectPublicKeyInfo,
        )
        .decode()
    )


def test_valid_hs256_token(verifier):
    assert verifier.verify(hs_token({"sub": "alice"})) is True


def test_wrong_key_fails(verifier):
    assert verifier.verify(hs_token({"sub": "alice"}, key="token")) is False


def test_algorithm_not_allowed_fails(verifier):
    assert verifier.verify(hs_token({"sub": "alice"}, algorithm="HS384")) is False


def test_no_algorithm_allowed_fails():
    assert JwtVerifier(clock=fixed_clock).verify(hs_token({"a": "b"})) is False


def test_hs384_verifier():
    verifier = JwtVerifier(clock=fixed_clock).init_verifier(SECRET, VerifierAlgorithm.HS384)
    assert verifier.verify(hs_token({"a": "b"}, algorithm="HS384")) is True
    assert verifier.verify(hs_token({"a": "b"}, algorithm="HS256")) is False


def test_hs512_verifier_accepts_hs256_tokens():
    verifier = JwtVerifier(clock=fixed_clock).init_verifier(SECRET, VerifierAlgorithm.HS512)
    assert verifier.verify(hs_token({"a": "b"}, algorithm="HS256")) is True
    assert verifier.verify(hs_token({"a": "b"}, algorithm="HS512")) is False


def test_garbage_token_fails(verifier):
    assert verifier.verify("not.a.jwt") is False


def test_expired_token(verifier):
    encoded = hs_token({"exp": NOW - 10})
    assert verifier.verify(encoded) is False
    verifier.set_leeway(10)
    assert verifier.verify(encoded) is True


def test_token_expiring_now_is_valid(verifier):
    assert verifier.verify(hs_token({"exp": NOW})) is True


def test_not_before_in_future(verifier):
    encoded = hs_token({"nbf": NOW + 30})
    assert verifier.verify(encoded) is False
    verifier.set_leeway(30)
    assert verifier.verify(encoded) is True


def test_issued_in_future(verifier):
    assert verifier.verify(hs_token({"iat": NOW + 5})) is False
    assert verifier.verify(hs_token({"iat": NOW - 5})) is True


def test_non_numeric_exp_fails(verifier):
    assert verifier.verify(hs_token({"exp": "tomorrow"})) is False


def test_negative_leeway_rejected(verifier):
    with pytest.raises(ValueError):
        verifier.set_leeway(-1)


def test_issuer(verifier):
    verifier.with_issuer("issuer-a")
    assert verifier.verify(hs_token({"iss": "issuer-a"})) is True
    assert verifier.verify(hs_token({"iss": "issuer-b"})) is False
    assert verifier.verify(hs_token({"sub": "x"})) is False


def test_subject_and_id(verifier):
    verifier.with_subject("alice").with_id("id-1")
    assert verifier.verify(hs_token({"sub": "alice", "jti": "id-1"})) is True
    assert verifier.verify(hs_token({"sub": "alice", "jti": "id-2"})) is False
    assert verifier.verify(hs_token({"sub": "bob", "jti": "id-1"})) is False


def test_audience_string_or_list(verifier):
    verifier.with_audience("game")
    assert verifier.verify(hs_token({"aud": "game"})) is True
    assert verifier.verify(hs_token({"aud": ["web", "game"]})) is True
    assert verifier.verify(hs_token({"aud": ["web"]})) is False
    assert verifier.verify(hs_token({"sub": "x"})) is False


def test_token_audience_without_requirement_is_accepted(verifier):
    assert verifier.verify(hs_token({"aud": "anything"})) is True


def test_last_audience_replaces_previous(verifier):
    verifier.with_audience("first").with_audience("second")
    assert verifier.verify(hs_token({"aud": "second"})) is True


def test_custom_claim(verifier):
    verifier.with_custom_claim("role", "admin")
    assert verifier.verify(hs_token({"role": "admin"})) is True
    assert verifier.verify(hs_token({"role": "user"})) is False


def test_custom_claim_type_must_match(verifier):
    verifier.with_custom_claim("level", "5")
    assert verifier.verify(hs_token({"level": 5})) is False
    assert verifier.verify(hs_token({"level": "5"})) is True


def test_rs256_token(rsa_private_key):
    verifier = JwtVerifier(clock=fixed_clock).init_verifier(
        public_pem(rsa_private_key), VerifierAlgorithm.RS256
    )
    encoded = jwt.encode({"sub": "alice"}, rsa_private_key, algorithm="RS256")
    assert verifier.verify(encoded) is True
    assert verifier.verify(jwt.encode({"sub": "alice"}, rsa_private_key, algorithm="RS384")) is False


def test_rs_verifier_rejects_token_from_other_key(rsa_private_key):
    other = rsa.generate_private_key(public_exponent=65537, key_size=2048)
    verifier = JwtVerifier(clock=fixed_clock).init_verifier(
        public_pem(rsa_private_key), VerifierAlgorithm.RS512
    )
    assert verifier.verify(jwt.encode({"a": 1}, other, algorithm="RS512")) is False
    assert verifier.verify(jwt.encode({"a": 1}, rsa_private_key, algorithm="RS512")) is True


def test_invalid_rsa_key_is_ignored(rsa_private_key):
    verifier = JwtVerifier(clock=fixed_clock).init_verifier("placeholder", VerifierAlgorithm.RS256)
    encoded = jwt.encode({"a": 1}, rsa_private_key, algorithm="RS256")
    assert verifier.verify(encoded) is False
    verifier.init_verifier(public_pem(rsa_private_key), VerifierAlgorithm.RS256)
    assert verifier.verify(encoded) is True


def test_several_algorithms_allowed(rsa_private_key):
    verifier = (
        JwtVerifier(clock=fixed_clock)
        .init_verifier(SECRET, VerifierAlgorithm.HS256)
        .init_verifier(public_pem(rsa_private_key), VerifierAlgorithm.RS256)
    )
    assert verifier.verify(hs_token({"a": 1})) is True
    assert verifier.verify(jwt.encode({"a": 1}, rsa_private_key, algorithm="RS256")) is True


def test_get_claims_strings_and_values(verifier):
    encoded = hs_token({"name": "alice", "n": 5, "tags": ["a", "b"], "ok": True})
    claims = verifier.get_claims(encoded)
    assert claims == {"name": "alice", "n": "5", "tags": '["a","b"]', "ok": "true"}


def test_get_claims_ignores_signature_and_expiry(verifier):
    encoded = hs_token({"sub": "bob", "exp": NOW - 1000}, key="token")
    assert verifier.get_claims(encoded)["sub"] == "bob"


def test_get_claims_empty_or_garbage(verifier):
    assert verifier.get_claims("") == {}
    assert verifier.get_claims("garbage") == {}