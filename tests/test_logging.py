import json
import logging
import unittest

from expense_manager.core.logging import (
    JsonFormatter,
    RequestContextFilter,
    request_id_ctx,
    user_id_ctx,
)


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord(
        "expense_manager.expenses", logging.INFO, __file__, 1, "recorded %s", ("x",), None
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class JsonLoggingTests(unittest.TestCase):
    def test_context_is_attached(self) -> None:
        rid_token = request_id_ctx.set("req-1")
        uid_token = user_id_ctx.set("42")
        try:
            record = _record()
            RequestContextFilter().filter(record)
        finally:
            user_id_ctx.reset(uid_token)
            request_id_ctx.reset(rid_token)

        line = json.loads(JsonFormatter().format(record))

        self.assertEqual(line["message"], "recorded x")
        self.assertEqual(line["request_id"], "req-1")
        self.assertEqual(line["user_id"], "42")
        self.assertEqual(line["logger"], "expense_manager.expenses")

    def test_defaults_outside_request(self) -> None:
        record = _record()
        RequestContextFilter().filter(record)
        line = json.loads(JsonFormatter().format(record))
        self.assertEqual(line["request_id"], "-")
        self.assertEqual(line["user_id"], "-")
        self.assertNotIn("status", line)

    def test_access_fields_are_emitted(self) -> None:
        record = _record(method="GET", path="/health", status=200, duration_ms=1.5)
        line = json.loads(JsonFormatter().format(record))
        self.assertEqual((line["method"], line["status"]), ("GET", 200))


if __name__ == "__main__":
    unittest.main()
