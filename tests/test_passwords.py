from leaselink.services.passwords import (
    HashedCredential,
    LegacyPlaintextCredential,
    credential_for,
    hash_password,
    hash_password_pbkdf2,
    looks_hashed,
    verify_password,
)


def test_bcrypt_hash_verifies_and_is_never_plaintext():
    stored = hash_password("s3cret!")

    assert stored != "s3cret!"
    assert looks_hashed(stored)
    assert verify_password("s3cret!", stored) is True
    assert verify_password("wrong", stored) is False


def test_pbkdf2_hash_verifies():
    stored = hash_password_pbkdf2("s3cret!", iterations=1000)

    assert stored.startswith("pbkdf2$1000$")
    assert verify_password("s3cret!", stored) is True
    assert verify_password("S3cret!", stored) is False


def test_password_longer_than_bcrypt_limit_is_accepted():
    long_password = "x" * 100
    stored = hash_password(long_password)

    assert verify_password(long_password, stored) is True


def test_credential_kind_is_chosen_by_hash_prefix():
    assert isinstance(credential_for(hash_password_pbkdf2("a", iterations=1000)), HashedCredential)
    assert isinstance(credential_for("$2b$12$abcdefghijklmnopqrstuv"), HashedCredential)
    assert isinstance(credential_for("hashed_password_123"), LegacyPlaintextCredential)


def test_legacy_plaintext_rows_still_verify():
    assert verify_password("hashed_password_123", "hashed_password_123") is True
    assert verify_password("hashed_password_12", "hashed_password_123") is False


def test_corrupted_hash_is_rejected_not_raised():
    assert verify_password("anything", "pbkdf2$notanumber$zz$zz") is False
    assert verify_password("anything", "$2b$broken") is False


def test_missing_stored_credential_never_matches():
    assert verify_password("", None) is False
    assert verify_password("", "") is False
