from __future__ import annotations

import hashlib
import hmac

import pytest

from digestcore import DigestContext, KeyedContext, hash_chunks, hash_digest, hmac_digest
from digestcore.crypto import available_algorithms

HASHLIB_NAMES = {
    "MD5": "md5",
    "SHA1": "sha1",
    "SHA224": "sha224",
    "SHA256": "sha256",
    "SHA384": "sha384",
    "SHA512": "sha512",
    "SHA3-256": "sha3_256",
    "SHA3-512": "sha3_512",
    "BLAKE2b-512": "blake2b",
    "BLAKE2s-256": "blake2s",
    "HMAC-MD5": "md5",
    "HMAC-SHA1": "sha1",
    "HMAC-SHA224": "sha224",
    "HMAC-SHA256": "sha256",
    "HMAC-SHA384": "sha384",
    "HMAC-SHA512": "sha512",
}

UNKEYED = [a for a in available_algorithms(keyed=False) if a.name in HASHLIB_NAMES]
KEYED = [a for a in available_algorithms(keyed=True) if a.name in HASHLIB_NAMES]


def _reference(alg, data: bytes, key: bytes = b"") -> bytes:
    name = HASHLIB_NAMES[alg.name]
    if alg.keyed:
        return hmac.new(key, data, name).digest()
    return hashlib.new(name, data).digest()


def test_sha256_abc_vector() -> None:
    expected = bytes.fromhex("ba7816bf8f01cfea414140de5dae2223b00361a396177a9cb410ff61f20015ad")

    assert hash_digest("SHA256", b"abc") == expected

    ctx = DigestContext.create("SHA256")
    ctx.update(b"ab")
    ctx.update(b"c")
    assert ctx.finalize() == expected


def test_md5_vectors() -> None:
    assert hash_digest("MD5", b"").hex() == "d41d8cd98f00b204e9800998ecf8427e"
    assert hash_digest("MD5", b"abc").hex() == "900150983cd24fb0d6963f7d28e17f72"


def test_hmac_sha256_fox_vector(fox: bytes) -> None:
    expected = "f7bc83f430538424b13298e6aa6fb143ef4d59a14946175997479dbc2d1a3cd8"
    assert hmac_digest("HMAC-SHA256", b"key", fox).hex() == expected


def test_hmac_md5_and_sha1_fox_vectors(fox: bytes) -> None:
    assert hmac_digest("HMAC-MD5", b"key", fox).hex() == "80070713463e7749b90c2dc24911e275"
    assert hmac_digest("HMAC-SHA1", b"key", fox).hex() == "de7c9b85b8b78aa6bc8a7a36f70a90701c9db4d9"


@pytest.mark.parametrize("alg", UNKEYED, ids=lambda a: a.name)
def test_zero_update_digest_is_empty_input_digest(alg) -> None:
    with DigestContext.create(alg) as ctx:
        assert ctx.finalize() == _reference(alg, b"")


@pytest.mark.parametrize("alg", KEYED, ids=lambda a: a.name)
def test_zero_update_hmac_is_empty_message_tag(alg) -> None:
    with KeyedContext.create(alg, b"secret") as ctx:
        assert ctx.finalize() == _reference(alg, b"", b"secret")


@pytest.mark.parametrize("alg", UNKEYED + KEYED, ids=lambda a: a.name)
def test_chunk_invariance(alg) -> None:
    a = b"incremental " * 17
    b = bytes(range(256)) * 3

    def run(chunks: list[bytes]) -> bytes:
        if alg.keyed:
            ctx = KeyedContext.create(alg, b"k" * 70)
        else:
            ctx = DigestContext.create(alg)
        with ctx:
            for chunk in chunks:
                ctx.update(chunk)
            return ctx.finalize()

    whole = run([a + b])
    assert run([a, b]) == whole
    assert run([a[:1], a[1:], b"", b]) == whole
    assert whole == _reference(alg, a + b, b"k" * 70)


@pytest.mark.parametrize("alg", UNKEYED + KEYED, ids=lambda a: a.name)
def test_independent_contexts_are_deterministic(alg) -> None:
    outputs = []
    for _ in range(2):
        if alg.keyed:
            ctx = KeyedContext.create(alg, b"key")
        else:
            ctx = DigestContext.create(alg)
        with ctx:
            ctx.update(b"determinism")
            ctx.update(bytearray(b" check"))
            outputs.append(ctx.finalize(truncate_to=10))
    assert outputs[0] == outputs[1]
    assert len(outputs[0]) == 10


@pytest.mark.parametrize("alg", UNKEYED, ids=lambda a: a.name)
def test_truncation_is_a_prefix_of_the_full_digest(alg) -> None:
    full = hash_digest(alg, b"abc")
    assert len(full) == alg.digest_size
    for length in (0, 1, alg.digest_size // 2, alg.digest_size, alg.digest_size + 1, 2**32 - 1):
        out = hash_digest(alg, b"abc", truncate_to=length)
        assert out == full[: min(alg.digest_size, length)]


def test_hash_chunks_accepts_any_iterable() -> None:
    gen = (bytes([i]) * 10 for i in range(5))
    assert hash_chunks("SHA256", gen) == hashlib.sha256(b"".join(bytes([i]) * 10 for i in range(5))).digest()


def test_hmac_verify_helper(fox: bytes) -> None:
    from digestcore import InvalidSignatureError, hmac_verify

    tag = bytes.fromhex("f7bc83f430538424b13298e6aa6fb143ef4d59a14946175997479dbc2d1a3cd8")
    hmac_verify("HMAC-SHA256", b"key", fox, tag)
    hmac_verify("HMAC-SHA256", b"key", fox, tag[:16], truncate_to=16)
    with pytest.raises(InvalidSignatureError):
        hmac_verify("HMAC-SHA256", b"key", fox + b".", tag)


def test_hmac_verify_helper_refuses_empty_tag() -> None:
    from digestcore import InvalidArgumentError, hmac_verify

    with pytest.raises(InvalidArgumentError):
        hmac_verify("HMAC-SHA256", b"key", b"attacker message", b"", truncate_to=0)
