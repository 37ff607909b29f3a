"""Password hashing tests (bcrypt with SHA-256 pre-hash)."""

from realestate.infrastructure.security import BcryptPasswordHasher, get_password_hash, verify_password


def test_hash_and_verify() -> None:
    hashed = get_password_hash("s3cret!", rounds=4)
    assert hashed != "s3cret!"
    assert verify_password("s3cret!", hashed)
    assert not verify_password("wrong", hashed)


def test_long_passwords_are_not_truncated() -> None:
    base = "x" * 80
    hashed = get_password_hash(base + "a", rounds=4)
    assert not verify_password(base + "b", hashed)


def test_malformed_hash_is_false() -> None:
    assert verify_password("x", "not-a-bcrypt-hash") is False
    assert verify_password("x", "") is False


def test_hasher_class() -> None:
    hasher = BcryptPasswordHasher(rounds=4)
    hashed = hasher.hash_password("pw123456")
    assert hasher.verify_password("pw123456", hashed)
