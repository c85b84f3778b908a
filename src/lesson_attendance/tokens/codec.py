"""Signed attendance token codec.

Wire format: ``base64url(canonical JSON) + "." + base64url(HMAC-SHA256)``,
both parts unpadded. The MAC covers the encoded payload text, so the payload
is authenticated before it is ever parsed.
"""

from __future__ import annotations

import base64
import binascii
import hashlib
import hmac
import json

from ..common.datetime_utils import parse_iso_date
from ..core.constants import TOKEN_KIND
from ..core.exceptions import BadSignature, InvalidKind, MalformedToken, ValidationError
from .model import AttendanceToken, QrSettings

SEPARATOR = "."


def b64url_encode(raw: bytes) -> str:
    return base64.urlsafe_b64encode(raw).rstrip(b"=").decode("ascii")


def b64url_decode(text: str) -> bytes:
    padded = text + "=" * (-len(text) % 4)
    return base64.urlsafe_b64decode(padded.encode("ascii"))


class TokenCodec:
    def __init__(self, settings: QrSettings):
        self._secret = settings.secret

    def _mac(self, payload_b64: str) -> str:
        digest = hmac.new(self._secret, payload_b64.encode("utf-8"), hashlib.sha256).digest()
        return b64url_encode(digest)

    def sign(self, token: AttendanceToken) -> str:
        body = {
            "type": token.kind,
            "lessonId": int(token.lesson_id),
            "date": token.civil_date.isoformat(),
            "exp": int(token.expires_at_unix),
            "nonce": token.nonce,
        }
        canonical = json.dumps(body, sort_keys=True, separators=(",", ":"), ensure_ascii=True)
        payload_b64 = b64url_encode(canonical.encode("utf-8"))
        return f"{payload_b64}{SEPARATOR}{self._mac(payload_b64)}"

    def verify(self, token_string: str) -> AttendanceToken:
        """Check integrity and kind. Expiry and lesson validity are the caller's job."""
        if not isinstance(token_string, str):
            raise MalformedToken("token must be a string")

        payload_b64, sep, sig_b64 = token_string.strip().partition(SEPARATOR)
        if not sep or not payload_b64 or not sig_b64:
            raise MalformedToken("token is missing its payload or signature")

        expected = self._mac(payload_b64).encode("ascii")
        if not hmac.compare_digest(sig_b64.encode("utf-8"), expected):
            raise BadSignature("token signature does not match")

        try:
            body = json.loads(b64url_decode(payload_b64).decode("utf-8"))
        except (binascii.Error, UnicodeError, ValueError) as exc:
            raise MalformedToken("token payload is not valid JSON") from exc
        if not isinstance(body, dict):
            raise MalformedToken("token payload is not an object")

        if body.get("type") != TOKEN_KIND:
            raise InvalidKind(f"unexpected token kind {body.get('type')!r}")

        try:
            return AttendanceToken(
                lesson_id=_strict_int(body["lessonId"]),
                civil_date=parse_iso_date(body["date"]),
                expires_at_unix=_strict_int(body["exp"]),
                nonce=str(body["nonce"]),
                kind=TOKEN_KIND,
            )
        except (KeyError, TypeError, ValueError, ValidationError) as exc:
            raise MalformedToken("token payload is incomplete") from exc


def _strict_int(value) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"expected integer, got {type(value).__name__}")
    return value
