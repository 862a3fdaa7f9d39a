"""
Obfuscation of cross application metadata.

Header values are JSON documents XOR-ed byte by byte with the repeating
``encoding_key`` shared by every application of an account, then base64
encoded. This keeps them opaque in transit; it is not encryption.
"""
import base64
import binascii
import re
from typing import Optional
from typing import Union

from ..errors import DecodeError
from ..internal.compat import ensure_binary
from ..internal.compat import ensure_text


# Standard alphabet, complete quanta, and only the padding the last quantum needs
_BASE64_REGEX = re.compile(rb"(?:[A-Za-z0-9+/]{4})*(?:[A-Za-z0-9+/]{2}==|[A-Za-z0-9+/]{3}=)?")


class Obfuscator(object):
    __slots__ = ("_key",)

    def __init__(self, key=None):
        # type: (Optional[Union[str, bytes]]) -> None
        self._key = ensure_binary(key, encoding="utf-8", errors="strict") if key else b""

    def obfuscate(self, plaintext):
        # type: (Union[str, bytes]) -> str
        data = ensure_binary(plaintext, encoding="utf-8", errors="strict")
        return ensure_text(base64.b64encode(self._xor(data)), encoding="ascii")

    def deobfuscate(self, token):
        # type: (Union[str, bytes]) -> bytes
        try:
            raw = ensure_binary(token, encoding="ascii", errors="strict")
            if _BASE64_REGEX.fullmatch(raw) is None:
                raise binascii.Error("not a padded base64 string")
            data = base64.b64decode(raw, validate=True)
        except (binascii.Error, ValueError, TypeError) as e:
            raise DecodeError("invalid obfuscated value: %s" % e) from e
        return self._xor(data)

    def _xor(self, data):
        # type: (bytes) -> bytes
        key = self._key
        if not key:
            # No shared key configured: the value is only base64 encoded
            return data
        key_length = len(key)
        return bytes(b ^ key[i % key_length] for i, b in enumerate(data))

    def __repr__(self):
        return "{}(keyed={})".format(self.__class__.__name__, bool(self._key))
