"""Field level encryption for the card number.

Tokens look like ``<iv hex>:<ciphertext hex>`` and are AES-256-CBC with
PKCS#7 padding. There is no authentication tag: a tampered token decrypts to
garbage or fails on padding, it is never detected as tampered.

The key is derived with scrypt from the caller's passphrase and a constant
salt. That makes every derivation for one passphrase identical, which keeps
tokens compatible with those issued by earlier deployments. Do not change the
salt or the scrypt parameters without versioning the token format, otherwise
previously encrypted documents can no longer be read.
"""

import os

from cryptography.hazmat.primitives import padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes
from cryptography.hazmat.primitives.kdf.scrypt import Scrypt

from converter.core.errors import DecryptionError
from converter.shared import Logger

logger = Logger(__name__).get_logger()

__all__ = ["FieldCipher", "decrypt", "derive_key", "encrypt"]

KEY_LENGTH = 32
IV_LENGTH = 16
BLOCK_SIZE_BITS = algorithms.AES.block_size
TOKEN_SEPARATOR = ":"

# Constant salt, kept for token compatibility
KDF_SALT = b"salt"
KDF_N = 2**14
KDF_R = 8
KDF_P = 1


def derive_key(passphrase: str) -> bytes:
    kdf = Scrypt(salt=KDF_SALT, length=KEY_LENGTH, n=KDF_N, r=KDF_R, p=KDF_P)
    return kdf.derive(passphrase.encode("utf-8"))


class FieldCipher:
    """Encrypts and decrypts single string fields with one derived key.

    Deriving the key is the expensive part, so a conversion call builds one
    instance and reuses it for every record.
    """

    def __init__(self, passphrase: str):
        self.__key = derive_key(passphrase)

    def encrypt(self, plaintext: str) -> str:
        iv = os.urandom(IV_LENGTH)

        padder = padding.PKCS7(BLOCK_SIZE_BITS).padder()
        padded = padder.update(plaintext.encode("utf-8")) + padder.finalize()

        encryptor = Cipher(algorithms.AES(self.__key), modes.CBC(iv)).encryptor()
        ciphertext = encryptor.update(padded) + encryptor.finalize()

        return f"{iv.hex()}{TOKEN_SEPARATOR}{ciphertext.hex()}"

    def decrypt(self, token: str) -> str:
        iv_hex, separator, cipher_hex = token.partition(TOKEN_SEPARATOR)
        if not separator:
            raise DecryptionError("encrypted value has no IV separator")

        try:
            iv = bytes.fromhex(iv_hex)
            ciphertext = bytes.fromhex(cipher_hex)
        except ValueError as e:
            raise DecryptionError("encrypted value is not valid hex") from e

        if len(iv) != IV_LENGTH:
            raise DecryptionError(f"IV must be {IV_LENGTH} bytes, got {len(iv)}")

        block_bytes = BLOCK_SIZE_BITS // 8
        if not ciphertext or len(ciphertext) % block_bytes:
            raise DecryptionError(
                f"ciphertext length {len(ciphertext)} is not a multiple of {block_bytes}"
            )

        decryptor = Cipher(algorithms.AES(self.__key), modes.CBC(iv)).decryptor()
        padded = decryptor.update(ciphertext) + decryptor.finalize()

        try:
            unpadder = padding.PKCS7(BLOCK_SIZE_BITS).unpadder()
            plaintext = unpadder.update(padded) + unpadder.finalize()
            return plaintext.decode("utf-8")
        except (ValueError, UnicodeDecodeError) as e:
            logger.warning("Failed to decrypt value: %s", e)
            raise DecryptionError("bad decrypt: wrong key or corrupted value") from e


def encrypt(plaintext: str, passphrase: str) -> str:
    return FieldCipher(passphrase).encrypt(plaintext)


def decrypt(token: str, passphrase: str) -> str:
    return FieldCipher(passphrase).decrypt(token)
