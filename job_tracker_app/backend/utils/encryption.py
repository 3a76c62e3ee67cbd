import base64
import logging
from typing import Optional

from Crypto.Cipher import AES

from ..config.settings import get_settings

logger = logging.getLogger(__name__)


def _get_key() -> bytes:
    # 64 hex characters -> 32 bytes (AES-256). Checked by Settings.
    return bytes.fromhex(get_settings().encryption_key)


def encrypt_data(plain_text_data: str) -> str:
    """
    Encrypts data using AES-256 in GCM mode.
    """
    cipher = AES.new(_get_key(), AES.MODE_GCM)
    cipher_text, tag = cipher.encrypt_and_digest(plain_text_data.encode('utf-8'))

    return base64.b64encode(cipher.nonce + tag + cipher_text).decode('utf-8')


def decrypt_data(encrypted_data: str) -> Optional[str]:
    """
    Decrypts data encrypted with AES-256 in GCM mode.
    Returns None when the payload is corrupt or was written with another key.
    """
    try:
        decoded_data = base64.b64decode(encrypted_data.encode('utf-8'))
        nonce = decoded_data[:16]
        tag = decoded_data[16:32]
        cipher_text = decoded_data[32:]

        cipher = AES.new(_get_key(), AES.MODE_GCM, nonce=nonce)
        return cipher.decrypt_and_verify(cipher_text, tag).decode('utf-8')
    except (ValueError, KeyError) as e:
        logger.error("Decryption failed: %s", str(e))
        return None
