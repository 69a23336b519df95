"""Tests for password-based wallet encryption."""

import pytest

from stealthwallet.cipher import (
    EncryptedData,
    decrypt_data,
    derive_encryption_key,
    encrypt_data,
)
from stealthwallet.types import TAG_SIZE, DecryptionFailedError
from test_vectors import TEST_PASSWORD, TEST_PLAINTEXTS, SequenceRandom


def _flip(data: bytes, index: int = 0) -> bytes:
    flipped = bytearray(data)
    flipped[index] ^= 0x01
    return bytes(flipped)


class TestKeyDerivation:
    """Test PBKDF2 key derivation."""

    def test_key_length(self) -> None:
        key = derive_encryption_key(TEST_PASSWORD, bytes(32))
        assert len(key) == 32

    def test_deterministic(self) -> None:
        salt = bytes(range(32))
        assert derive_encryption_key(TEST_PASSWORD, salt) == derive_encryption_key(TEST_PASSWORD, salt)

    def test_salt_changes_key(self) -> None:
        assert derive_encryption_key(TEST_PASSWORD, bytes(32)) != derive_encryption_key(
            TEST_PASSWORD, b"\x01" * 32
        )

    def test_iterations_change_key(self) -> None:
        salt = bytes(32)
        assert derive_encryption_key(TEST_PASSWORD, salt, 1000) != derive_encryption_key(
            TEST_PASSWORD, salt, 1001
        )


class TestEncryption:
    """Test encrypt/decrypt."""

    @pytest.mark.parametrize("name", list(TEST_PLAINTEXTS))
    def test_round_trip(self, name: str) -> None:
        plaintext = TEST_PLAINTEXTS[name]
        encrypted = encrypt_data(plaintext, TEST_PASSWORD)

        decrypted = decrypt_data(
            encrypted.ciphertext, TEST_PASSWORD, encrypted.salt, encrypted.nonce
        )
        assert decrypted == plaintext

    def test_sizes(self) -> None:
        encrypted = encrypt_data(b"secret", TEST_PASSWORD)

        assert len(encrypted.salt) == 32
        assert len(encrypted.nonce) == 12
        # Plaintext plus GCM tag
        assert len(encrypted.ciphertext) == len(b"secret") + TAG_SIZE

    def test_fresh_salt_and_nonce(self) -> None:
        first = encrypt_data(b"secret", TEST_PASSWORD)
        second = encrypt_data(b"secret", TEST_PASSWORD)

        assert first.salt != second.salt
        assert first.nonce != second.nonce
        assert first.ciphertext != second.ciphertext

    def test_injected_randomness(self) -> None:
        """Salt is drawn before nonce."""
        rng = SequenceRandom([7, 9])
        encrypted = encrypt_data(b"secret", TEST_PASSWORD, rng)

        assert encrypted.salt == (7).to_bytes(32, "big")
        assert encrypted.nonce == (9).to_bytes(12, "big")
        assert rng.calls == 2

    def test_same_randomness_same_ciphertext(self) -> None:
        first = encrypt_data(b"secret", TEST_PASSWORD, SequenceRandom([1, 2]))
        second = encrypt_data(b"secret", TEST_PASSWORD, SequenceRandom([1, 2]))

        assert first == second

    def test_unicode_password(self) -> None:
        password = "pässwörd 🔑"
        encrypted = encrypt_data(b"secret", password)

        assert decrypt_data(encrypted.ciphertext, password, encrypted.salt, encrypted.nonce) == b"secret"


class TestDecryptionFailures:
    """Every kind of failure surfaces as DecryptionFailedError."""

    @pytest.fixture
    def encrypted(self) -> EncryptedData:
        return encrypt_data(b'{"spendingPrivateKey": "0x01"}', TEST_PASSWORD)

    def test_wrong_password(self, encrypted: EncryptedData) -> None:
        with pytest.raises(DecryptionFailedError):
            decrypt_data(encrypted.ciphertext, "wrong password", encrypted.salt, encrypted.nonce)

    def test_empty_password(self, encrypted: EncryptedData) -> None:
        with pytest.raises(DecryptionFailedError):
            decrypt_data(encrypted.ciphertext, "", encrypted.salt, encrypted.nonce)

    @pytest.mark.parametrize("index", [0, 5, -1])
    def test_flipped_ciphertext(self, encrypted: EncryptedData, index: int) -> None:
        with pytest.raises(DecryptionFailedError):
            decrypt_data(_flip(encrypted.ciphertext, index), TEST_PASSWORD, encrypted.salt, encrypted.nonce)

    def test_flipped_salt(self, encrypted: EncryptedData) -> None:
        with pytest.raises(DecryptionFailedError):
            decrypt_data(encrypted.ciphertext, TEST_PASSWORD, _flip(encrypted.salt), encrypted.nonce)

    def test_flipped_nonce(self, encrypted: EncryptedData) -> None:
        with pytest.raises(DecryptionFailedError):
            decrypt_data(encrypted.ciphertext, TEST_PASSWORD, encrypted.salt, _flip(encrypted.nonce))

    def test_truncated_ciphertext(self, encrypted: EncryptedData) -> None:
        with pytest.raises(DecryptionFailedError):
            decrypt_data(encrypted.ciphertext[:10], TEST_PASSWORD, encrypted.salt, encrypted.nonce)

    def test_single_error_message(self, encrypted: EncryptedData) -> None:
        """Wrong password and tampering are indistinguishable."""
        with pytest.raises(DecryptionFailedError) as wrong_password:
            decrypt_data(encrypted.ciphertext, "nope", encrypted.salt, encrypted.nonce)
        with pytest.raises(DecryptionFailedError) as tampered:
            decrypt_data(_flip(encrypted.ciphertext), TEST_PASSWORD, encrypted.salt, encrypted.nonce)

        assert str(wrong_password.value) == str(tampered.value)
        assert wrong_password.value.__cause__ is None
