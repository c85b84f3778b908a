from __future__ import annotations

import logging

from lesson_attendance.common.logging_utils import TokenMaskingFilter, configure_logging, mask_token
from lesson_attendance.tokens.model import AttendanceToken


def test_mask_token_hides_signed_tokens(codec):
    from datetime import date

    token = codec.sign(AttendanceToken(101, date(2024, 3, 4), 1709543700, "n" * 22))

    masked = mask_token(f"scan failed for {token} today")

    assert token not in masked
    assert "<token:***>" in masked


def test_filter_masks_arguments(codec):
    from datetime import date

    token = codec.sign(AttendanceToken(101, date(2024, 3, 4), 1709543700, "n" * 22))
    record = logging.LogRecord("x", logging.INFO, __file__, 1, "token=%s", (token,), None)

    TokenMaskingFilter().filter(record)

    assert token not in record.getMessage()


def test_configure_logging_installs_one_handler():
    first = configure_logging("INFO")
    second = configure_logging("DEBUG")

    assert first is second
    assert sum(1 for h in second.handlers if getattr(h, "_lesson_attendance", False)) == 1
    assert second.level == logging.DEBUG
