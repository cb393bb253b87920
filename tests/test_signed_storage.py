"""Tests for the signed-token storage backend."""

import jwt
import pytest
from cryptography.fernet import Fernet
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

from asgi_sessions import SignedCookieStorage

@pytest.mark.asyncio
async def test_resolve_none_signs_empty_data(signed_storage):
    token, data = await signed_storage.resolve(None)
    assert data == {}
    assert signed_storage.unsign(token) == {}

@pytest.mark.asyncio
async def test_write_returns_token_holding_data(signed_storage):
    token = await signed_storage.write("ignored", {"foo": 3})
    assert token.count(".") == 2
    assert await signed_storage.resolve(token) == (token, {"foo": 3})

@pytest.mark.asyncio
async def test_data_is_nested_under_data_claim(signed_storage, signing_secret):
    token = await signed_storage.write("ignored", {"exp": "not-a-timestamp"})
    payload = jwt.decode(token, signing_secret, algorithms=["HS256"])
    assert payload == {"data": {"exp": "not-a-timestamp"}}
    _, data = await signed_storage.resolve(token)
    assert data == {"exp": "not-a-timestamp"}

@pytest.mark.asyncio
async def test_wrong_secret_yields_fresh_session(signed_storage):
    other = SignedCookieStorage(key="another-secret-key-that-is-long-enough-0123")
    forged = await other.write("ignored", {"admin": True})
    token, data = await signed_storage.resolve(forged)
    assert data == {}
    assert token != forged
    assert signed_storage.unsign(token) == {}

@pytest.mark.asyncio
async def test_garbage_token_yields_fresh_session(signed_storage):
    token, data = await signed_storage.resolve("foobar")
    assert data == {}
    assert token != "foobar"

@pytest.mark.asyncio
async def test_token_without_data_claim_is_rejected(signed_storage, signing_secret):
    bare = jwt.encode({"sub": "x"}, signing_secret, algorithm="HS256")
    token, data = await signed_storage.resolve(bare)
    assert data == {}
    assert token != bare

@pytest.mark.asyncio
async def test_delete_is_noop(signed_storage):
    assert await signed_storage.delete("some-token") == "some-token"

@pytest.mark.asyncio
async def test_random_key_when_omitted():
    a = SignedCookieStorage()
    b = SignedCookieStorage()
    token = await a.write("ignored", {"foo": 1})
    assert (await a.resolve(token))[1] == {"foo": 1}
    assert (await b.resolve(token))[1] == {}

@pytest.mark.asyncio
async def test_encrypted_tokens(signing_secret):
    storage = SignedCookieStorage(key=signing_secret, encryption_key=Fernet.generate_key())
    token = await storage.write("ignored", {"secret": "value"})
    # Not a readable JWS
    assert token.count(".") != 2
    assert (await storage.resolve(token))[1] == {"secret": "value"}

    plain = SignedCookieStorage(key=signing_secret)
    jws = await plain.write("ignored", {"secret": "value"})
    assert (await storage.resolve(jws))[1] == {}

@pytest.mark.asyncio
async def test_asymmetric_algorithm():
    private_key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
    private_pem = private_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    )
    public_pem = private_key.public_key().public_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    )
    storage = SignedCookieStorage(key=private_pem, algorithm="RS256", verify_key=public_pem)
    token = await storage.write("ignored", {"foo": 1})
    assert jwt.get_unverified_header(token)["alg"] == "RS256"
    assert (await storage.resolve(token))[1] == {"foo": 1}
