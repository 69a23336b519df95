"""
Password-based encryption for wallet key material.

Keys are encrypted with AES-256-GCM under a key derived from the password
with PBKDF2-HMAC-SHA256 (100,000 iterations). Every call draws a fresh 32-byte
salt and 12-byte nonce, so encrypting the same data twice never produces the
same ciphertext.

Decryption failures are reported with a single error type and message, whether
the password was wrong or the salt, nonce or ciphertext was altered.
"""

import os
from dataclasses import dataclass

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from .curve import RandBytes
from .types import (
    ENCRYPTION_KEY_SIZE,
    NONCE_SIZE,
    PBKDF2_ITERATIONS,
    SALT_SIZE,
    DecryptionFailedError,
)


@dataclass(frozen=True)
class EncryptedData:
    """AES-256-GCM ciphertext (with tag) and the parameters to decrypt it."""
    ciphertext: bytes
    salt: bytes  # 32 bytes
    nonce: bytes  # 12 bytes


def derive_encryption_key(
    password: str,
    salt: bytes,
    iterations: int = PBKDF2_ITERATIONS,
) -> bytes:
    """Derive a 32-byte encryption key from a password using PBKDF2."""
    kdf = PBKDF2HMAC(
        algorithm=hashes.SHA256(),
        length=ENCRYPTION_KEY_SIZE,
        salt=salt,
        iterations=iterations,
    )
    return kdf.derive(password.encode("utf-8"))


def encrypt_data(
    plaintext: bytes,
    password: str,
    randbytes: RandBytes = os.urandom,
    iterations: int = PBKDF2_ITERATIONS,
) -> EncryptedData:
    """
    Encrypt data with a password.

    Args:
        plaintext: Data to encrypt
        password: User password
        randbytes: Source of the salt and nonce
        iterations: PBKDF2 iteration count

    Returns:
        EncryptedData with ciphertext, salt and nonce
    """
    salt = randbytes(SALT_SIZE)
    nonce = randbytes(NONCE_SIZE)

    key = derive_encryption_key(password, salt, iterations)

    aesgcm = AESGCM(key)
    ciphertext = aesgcm.encrypt(nonce, plaintext, None)

    return EncryptedData(ciphertext=ciphertext, salt=salt, nonce=nonce)


def decrypt_data(
    ciphertext: bytes,
    password: str,
    salt: bytes,
    nonce: bytes,
    iterations: int = PBKDF2_ITERATIONS,
) -> bytes:
    """
    Decrypt data with a password.

    Raises:
        DecryptionFailedError: If authentication fails for any reason
    """
    key = derive_encryption_key(password, salt, iterations)

    try:
        aesgcm = AESGCM(key)
        return aesgcm.decrypt(nonce, ciphertext, None)
    except (InvalidTag, ValueError):
        raise DecryptionFailedError() from None
