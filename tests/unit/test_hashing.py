from playerclaim.core.hashing import NationalIdHasher, looks_like_bcrypt


def test_hash_is_salted_bcrypt_and_verifiable() -> None:
    hasher = NationalIdHasher(rounds=4)

    first = hasher.hash("10000000146")
    second = hasher.hash("10000000146")

    assert looks_like_bcrypt(first)
    assert "10000000146" not in first
    assert first != second
    assert hasher.matches("10000000146", first)
    assert not hasher.matches("10000000147", first)


def test_looks_like_bcrypt_rejects_plaintext() -> None:
    assert not looks_like_bcrypt("10000000146")
    assert not looks_like_bcrypt("$2b$04$short")
