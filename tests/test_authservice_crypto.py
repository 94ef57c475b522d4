import pytest

from components.authservice.crypto import HS256TokenSigner
from components.authservice.errors import (
    TokenExpired, TokenInvalidSignature, TokenMalformed, Unauthenticated,
)

def _signer(clock, secret="test-secret"):
    return HS256TokenSigner(secret, kid="k1", clock=clock)

def _replace(token: str, idx: int, ch: str) -> str:
    return token[:idx] + ch + token[idx + 1:]

def test_sign_then_verify_returns_user_id(clock):
    signer = _signer(clock)
    token = signer.sign("user-1", 900)
    assert signer.verify(token) == "user-1"

    claims = signer.decode(token)
    assert claims.exp - claims.iat == 900
    assert claims.jti

def test_negative_ttl_is_expired(clock):
    signer = _signer(clock)
    token = signer.sign("user-1", -1)
    with pytest.raises(TokenExpired):
        signer.verify(token)

def test_token_expires_when_clock_reaches_exp(clock):
    signer = _signer(clock)
    token = signer.sign("user-1", 900)

    clock.advance(899)
    assert signer.verify(token) == "user-1"

    clock.advance(1)
    with pytest.raises(TokenExpired):
        signer.verify(token)

def test_tokens_minted_in_same_second_differ(clock):
    signer = _signer(clock)
    assert signer.sign("user-1", 900) != signer.sign("user-1", 900)

def test_any_edited_character_breaks_signature(clock):
    signer = _signer(clock)
    token = signer.sign("user-1", 900)
    for idx, ch in enumerate(token):
        if ch == ".":
            continue
        tampered = _replace(token, idx, "A" if ch != "A" else "B")
        with pytest.raises(TokenInvalidSignature):
            signer.verify(tampered)

def test_last_signature_character_is_fully_checked(clock):
    signer = _signer(clock)
    for n in range(40):
        token = signer.sign(f"user-{n}", 900)
        last = token[-1]
        for bit in range(8):
            edited = chr(ord(last) ^ (1 << bit))
            if edited == ".":
                continue
            with pytest.raises(TokenInvalidSignature):
                signer.verify(_replace(token, len(token) - 1, edited))

def test_every_bit_flip_is_rejected(clock):
    signer = _signer(clock)
    token = signer.sign("user-1", 900)
    for idx, ch in enumerate(token):
        for bit in range(8):
            flipped = _replace(token, idx, chr(ord(ch) ^ (1 << bit)))
            # A flip that adds or removes a "." changes the segment count.
            expected = TokenInvalidSignature if flipped.count(".") == 2 else TokenMalformed
            with pytest.raises(expected):
                signer.verify(flipped)

def test_other_secret_is_rejected(clock):
    token = _signer(clock, "secret-a").sign("user-1", 900)
    with pytest.raises(TokenInvalidSignature):
        _signer(clock, "secret-b").verify(token)

@pytest.mark.parametrize("token", ["", "abc", "a.b", "a.b.c.d"])
def test_malformed_tokens(clock, token):
    with pytest.raises(TokenMalformed):
        _signer(clock).verify(token)

def test_signed_payload_without_subject_is_malformed(clock):
    signer = _signer(clock)
    token = signer._encode({"iat": 1, "exp": 2})
    with pytest.raises(TokenMalformed):
        signer.verify(token)

def test_failure_kinds_are_distinguishable_but_share_a_base():
    for cls in (TokenMalformed, TokenExpired, TokenInvalidSignature):
        assert issubclass(cls, Unauthenticated)
        assert cls.status_code == 401
    codes = {TokenMalformed.code, TokenExpired.code, TokenInvalidSignature.code}
    assert len(codes) == 3

def test_empty_secret_is_refused():
    with pytest.raises(ValueError):
        HS256TokenSigner("")

def test_repr_does_not_leak_secret(clock):
    assert "test-secret" not in repr(_signer(clock))
