"""Byte, radix and cipher codecs shared by the extractors.

All helpers are pure.  Cipher primitives come from pycryptodome; decode
failures surface as ``ValueError`` (or ``binascii.Error``, a subclass)
so callers can treat them uniformly.
"""

from __future__ import annotations

import base64

from Crypto.Cipher import AES, ARC4
from Crypto.Util.Padding import pad, unpad


def rot13(text: str) -> str:
    """Apply ROT13 to ASCII letters; applying it twice is the identity."""
    result: list[str] = []
    for ch in text:
        code = ord(ch)
        if 0x41 <= code <= 0x5A:  # A-Z
            code = (code - 0x41 + 13) % 26 + 0x41
        elif 0x61 <= code <= 0x7A:  # a-z
            code = (code - 0x61 + 13) % 26 + 0x61
        result.append(chr(code))
    return "".join(result)


def char_shift(text: str, shift: int) -> str:
    """Shift each character code by ``-shift``."""
    return "".join(chr(ord(ch) - shift) for ch in text)


def b64decode_padded(data: str, *, urlsafe: bool = False) -> bytes:
    """Decode base64, restoring stripped ``=`` padding first.

    With ``urlsafe=True`` the ``-``/``_`` alphabet is accepted.
    """
    data = data.strip()
    padding = -len(data) % 4
    if padding:
        data += "=" * padding
    if urlsafe:
        return base64.urlsafe_b64decode(data)
    return base64.b64decode(data, validate=False)


def b64_to_text(data: str, *, urlsafe: bool = False) -> str:
    return b64decode_padded(data, urlsafe=urlsafe).decode("utf-8")


def b64encode_text(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


def hex_to_bytes(data: str) -> bytes:
    return bytes.fromhex(data.strip())


def _key_bytes(value: str | bytes) -> bytes:
    return value.encode("utf-8") if isinstance(value, str) else value


def aes_cbc_decrypt(
    ciphertext: bytes,
    key: str | bytes,
    iv: str | bytes,
) -> bytes:
    """AES-CBC decrypt with PKCS#7 unpadding."""
    cipher = AES.new(_key_bytes(key), AES.MODE_CBC, _key_bytes(iv))
    return unpad(cipher.decrypt(ciphertext), AES.block_size)


def aes_cbc_encrypt(
    plaintext: bytes,
    key: str | bytes,
    iv: str | bytes,
) -> bytes:
    """AES-CBC encrypt with PKCS#7 padding."""
    cipher = AES.new(_key_bytes(key), AES.MODE_CBC, _key_bytes(iv))
    return cipher.encrypt(pad(plaintext, AES.block_size))


def rc4_crypt(data: bytes, key: str | bytes) -> bytes:
    """RC4 keystream XOR; the same call encrypts and decrypts."""
    key_bytes = _key_bytes(key)
    if not 5 <= len(key_bytes) <= 256:
        raise ValueError(f"RC4 key length out of range: {len(key_bytes)}")
    return ARC4.new(key_bytes).encrypt(data)
