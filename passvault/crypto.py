"""
PassVault - Cryptography Module

All cryptographic operations used by the app, built on the 'cryptography'
library:

    1. Account password -> scrypt -> Account Key (32 bytes)
    2. Account Key -> HKDF -> Subkeys (auth, content)
    3. auth_key is hashed into a verifier the identity provider stores
    4. content_key seals the password field of every credential (AES-GCM)

The content key is never written to disk: it is re-derived at sign-in and
lives only in the Session. The document store therefore holds sealed
tokens, never plaintext passwords.
"""

import base64
import hashlib
import hmac
import json
import os
from typing import Dict

from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from cryptography.hazmat.primitives.kdf.hkdf import HKDF
from cryptography.hazmat.primitives.kdf.scrypt import Scrypt


# =============================================================================
# Configuration
# =============================================================================

KEY_SIZE = 32            # 256-bit keys
SALT_SIZE = 16
NONCE_SIZE = 12          # 96-bit nonce for AES-GCM

# scrypt parameters: N = CPU/memory cost (power of 2), r = block size, p = parallelization
SCRYPT_N = 2**15
SCRYPT_R = 8
SCRYPT_P = 1


# =============================================================================
# Key Derivation
# =============================================================================

def new_salt() -> bytes:
    return os.urandom(SALT_SIZE)


def derive_account_key(password: str, salt: bytes) -> bytes:
    """
    Derive the account key from an account password using scrypt.

    Args:
        password: The user's sign-in password
        salt: Per-account random salt (stored with the account, not secret)

    Returns:
        32-byte account key
    """
    kdf = Scrypt(
        salt=salt,
        length=KEY_SIZE,
        n=SCRYPT_N,
        r=SCRYPT_R,
        p=SCRYPT_P,
    )
    return kdf.derive(password.encode('utf-8'))


def derive_subkeys(account_key: bytes) -> Dict[str, bytes]:
    """
    Split the account key into independent subkeys with HKDF.

    Returns:
        Dictionary with:
        - auth_key: Proves knowledge of the password (only its hash is stored)
        - content_key: Seals credential fields
    """
    def hkdf(info: str) -> bytes:
        h = HKDF(
            algorithm=hashes.SHA256(),
            length=KEY_SIZE,
            salt=None,
            info=info.encode('utf-8')
        )
        return h.derive(account_key)

    return {
        'auth_key': hkdf('passvault-auth-v1'),
        'content_key': hkdf('passvault-content-v1'),
    }


def auth_verifier(auth_key: bytes) -> bytes:
    """SHA-256 of the auth key; what the account document keeps."""
    return hashlib.sha256(auth_key).digest()


# =============================================================================
# Field Sealing (AES-256-GCM)
# =============================================================================

def canonical_ad(ad: dict) -> bytes:
    """Associated data as canonical JSON: sorted keys, compact, UTF-8."""
    json_str = json.dumps(ad, separators=(",", ":"), sort_keys=True, ensure_ascii=False)
    return json_str.encode('utf-8')


def seal_field(key: bytes, plaintext: str, context: dict) -> str:
    """
    Encrypt a single document field.

    The context (user id, document id, field name) is bound as associated
    data, so a sealed value copied into another document or field will
    not open.

    Args:
        key: 32-byte content key
        plaintext: Field value
        context: Dict identifying where the value lives

    Returns:
        base64(nonce || ciphertext+tag), safe to store in JSON
    """
    nonce = os.urandom(NONCE_SIZE)
    ciphertext = AESGCM(key).encrypt(nonce, plaintext.encode('utf-8'), canonical_ad(context))
    return base64.b64encode(nonce + ciphertext).decode('ascii')


def open_field(key: bytes, token: str, context: dict) -> str:
    """
    Decrypt a value produced by seal_field().

    Raises:
        cryptography.exceptions.InvalidTag: Wrong key, wrong context or tampered token
    """
    raw = base64.b64decode(token)
    nonce, ciphertext = raw[:NONCE_SIZE], raw[NONCE_SIZE:]
    plaintext = AESGCM(key).decrypt(nonce, ciphertext, canonical_ad(context))
    return plaintext.decode('utf-8')


# =============================================================================
# Helpers
# =============================================================================

def constant_compare(a: bytes, b: bytes) -> bool:
    """Compare two byte strings in constant time."""
    return hmac.compare_digest(a, b)
