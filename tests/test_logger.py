from __future__ import annotations

import json
import logging

from bekind_admin_sdk.logger import REDACTED, get_logger, log_event, redact


def test_redact_masks_sensitive_keys() -> None:
    masked = redact({"token": "abc", "Authorization": "Bearer abc", "user_password": "x", "path": "/a"})

    assert masked == {"token": REDACTED, "Authorization": REDACTED, "user_password": REDACTED, "path": "/a"}


def test_log_event_emits_one_json_line(caplog) -> None:
    logger = get_logger("bekind_admin_sdk.tests")

    with caplog.at_level(logging.INFO, logger="bekind_admin_sdk"):
        log_event(logger, "auth", "login", "success", trace_id="t-1", token="secret", status_code=200)

    record = json.loads(caplog.records[-1].getMessage())
    assert record["module"] == "auth"
    assert record["action"] == "login"
    assert record["outcome"] == "success"
    assert record["trace_id"] == "t-1"
    assert record["level"] == "INFO"
    assert record["token"] == REDACTED
    assert record["status_code"] == 200


def test_log_event_respects_level(caplog) -> None:
    logger = get_logger("bekind_admin_sdk.tests")

    with caplog.at_level(logging.WARNING, logger="bekind_admin_sdk"):
        log_event(logger, "listing", "refetch", "stale_discarded", level=logging.DEBUG)

    assert caplog.records == []
