from __future__ import annotations

import json
from datetime import date

import pytest

from lesson_attendance.core.exceptions import BadSignature, InvalidKind, MalformedToken, TokenError
from lesson_attendance.tokens.codec import TokenCodec, b64url_decode, b64url_encode
from lesson_attendance.tokens.model import AttendanceToken, QrSettings


def _payload(**overrides) -> AttendanceToken:
    values = dict(lesson_id=101, civil_date=date(2024, 3, 4), expires_at_unix=1709543700, nonce="q8Zb1mX0f3lA9hP2sV7cWw")
    values.update(overrides)
    return AttendanceToken(**values)


@pytest.mark.parametrize(
    "payload",
    [
        _payload(),
        _payload(lesson_id=1, civil_date=date(2023, 12, 31), expires_at_unix=0),
        _payload(lesson_id=987654321, nonce="-_-_" * 8),
    ],
)
def test_verify_returns_signed_payload(codec, payload):
    assert codec.verify(codec.sign(payload)) == payload


def test_token_shape_is_qr_friendly(codec):
    token = codec.sign(_payload())

    payload_b64, sig_b64 = token.split(".")
    assert "=" not in token
    assert len(sig_b64) == 43
    assert 150 <= len(token) <= 250
    assert json.loads(b64url_decode(payload_b64))["type"] == "lesson_attendance"


def test_canonical_json_is_sorted_and_compact(codec):
    payload_b64 = codec.sign(_payload()).split(".")[0]
    text = b64url_decode(payload_b64).decode()

    assert text == json.dumps(json.loads(text), sort_keys=True, separators=(",", ":"))


def test_every_single_bit_flip_is_rejected(codec):
    token = codec.sign(_payload())
    raw = token.encode("ascii")
    sep_index = token.index(".")

    for i in range(len(raw)):
        for bit in range(8):
            flipped = bytearray(raw)
            flipped[i] ^= 1 << bit
            tampered = flipped.decode("latin-1")
            if tampered.strip() == token:
                continue
            if i == sep_index:
                with pytest.raises(TokenError):
                    codec.verify(tampered)
            else:
                with pytest.raises(BadSignature):
                    codec.verify(tampered)


def test_other_secret_is_bad_signature(codec):
    other = TokenCodec(QrSettings(secret=b"another-secret", ttl_seconds=900))

    with pytest.raises(BadSignature):
        codec.verify(other.sign(_payload()))


@pytest.mark.parametrize("token", ["", "no-separator-here", ".sigonly", "payloadonly.", 42, None])
def test_structure_errors_are_malformed(codec, token):
    with pytest.raises(MalformedToken):
        codec.verify(token)


def test_wrong_kind_is_rejected_after_signature(codec):
    with pytest.raises(InvalidKind):
        codec.verify(codec.sign(_payload(kind="staff_checkin")))


def test_signed_garbage_payload_is_malformed(codec):
    payload_b64 = b64url_encode(b'{"type":"lesson_attendance","lessonId":"12"}')
    token = f"{payload_b64}.{codec._mac(payload_b64)}"

    with pytest.raises(MalformedToken):
        codec.verify(token)


def test_verify_does_not_check_expiry(codec):
    stale = _payload(expires_at_unix=1)

    assert codec.verify(codec.sign(stale)).expires_at_unix == 1


def test_settings_hide_secret():
    settings = QrSettings(secret=b"super-secret", ttl_seconds=900)

    assert "super-secret" not in repr(settings)
    with pytest.raises(ValueError):
        QrSettings(secret=b"", ttl_seconds=900)
