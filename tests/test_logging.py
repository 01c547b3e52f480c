"""
Tests for logging setup — level resolution, handlers, secret redaction.
"""

import json
import logging

import pytest

from kasmctl.core.observability.logging_config import (
    LogSettings,
    RedactSecretsFilter,
    _parse_level,
    setup_logging,
)


@pytest.fixture(autouse=True)
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    for h in root.handlers:
        if h not in handlers:
            h.close()
    root.handlers[:] = handlers
    root.setLevel(level)


class TestParseLevel:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("DEBUG", logging.DEBUG),
            ("info", logging.INFO),
            (" error ", logging.ERROR),
            ("", logging.WARNING),
            (None, logging.WARNING),
            ("LOUD", logging.WARNING),
        ],
    )
    def test_levels(self, raw, expected):
        assert _parse_level(raw) == expected


class TestResolve:
    def test_default_is_warning(self):
        assert LogSettings.resolve(env={}).level == logging.WARNING

    def test_env_level(self):
        assert LogSettings.resolve(env={"KASMCTL_LOG_LEVEL": "info"}).level == logging.INFO

    def test_flags_beat_env(self):
        env = {"KASMCTL_LOG_LEVEL": "ERROR"}
        assert LogSettings.resolve(debug=True, env=env).level == logging.DEBUG
        assert LogSettings.resolve(verbose=True, env=env).level == logging.INFO
        assert LogSettings.resolve(quiet=True, env={"KASMCTL_LOG_LEVEL": "DEBUG"}).level == logging.ERROR

    def test_debug_beats_quiet(self):
        assert LogSettings.resolve(debug=True, quiet=True, env={}).level == logging.DEBUG

    def test_file_settings(self):
        s = LogSettings.resolve(env={"KASMCTL_LOG_FILE": "/tmp/k.log", "KASMCTL_LOG_FILE_LEVEL": "debug"})
        assert s.log_file == "/tmp/k.log"
        assert s.file_level == logging.DEBUG

    def test_no_file(self):
        s = LogSettings.resolve(env={})
        assert s.log_file is None
        assert s.file_level is None


class TestSetupLogging:
    def test_console_only(self):
        setup_logging(LogSettings(level=logging.INFO))
        root = logging.getLogger()
        assert len(root.handlers) == 1
        assert root.level == logging.INFO

    def test_file_handler_lowers_root_level(self, tmp_path):
        log_file = tmp_path / "kasmctl.log"
        setup_logging(LogSettings(level=logging.WARNING, log_file=str(log_file), file_level=logging.DEBUG))
        root = logging.getLogger()
        assert len(root.handlers) == 2
        assert root.level == logging.DEBUG

        logging.getLogger("kasmctl.test").debug("to the file only")
        for h in root.handlers:
            h.flush()
        assert "to the file only" in log_file.read_text()

    def test_quiets_third_party(self):
        setup_logging(LogSettings(level=logging.INFO))
        assert logging.getLogger("urllib3").level == logging.WARNING


class TestRedactSecrets:
    def _record(self, msg, *args):
        return logging.LogRecord("kasmctl", logging.DEBUG, __file__, 1, msg, args, None)

    def test_masks_json_body(self):
        record = self._record('body: {"api_key": "abc123", "api_key_secret": "s3cr3t", "kasm_id": "k1"}')
        RedactSecretsFilter().filter(record)
        message = record.getMessage()
        assert "abc123" not in message
        assert "s3cr3t" not in message
        assert '"kasm_id": "k1"' in message

    def test_masks_formatted_args(self):
        record = self._record("sending %s", "api_key=abc123")
        RedactSecretsFilter().filter(record)
        assert record.getMessage() == "sending api_key=***"

    def test_leaves_other_messages(self):
        record = self._record("POST %s", "/api/public/get_kasms")
        assert RedactSecretsFilter().filter(record)
        assert record.getMessage() == "POST /api/public/get_kasms"

    def test_masks_whole_value_with_comma_and_quote(self):
        body = json.dumps({"api_key": "k,ey", "api_key_secret": 'se"c,ret}', "kasm_id": "k1"})
        record = self._record("POST %s %s", "http://kasm/api/public/get_kasms", body)
        RedactSecretsFilter().filter(record)
        message = record.getMessage()
        assert "k,ey" not in message
        assert "c,ret" not in message
        assert json.loads(message.split(" ", 2)[2]) == {
            "api_key": "***",
            "api_key_secret": "***",
            "kasm_id": "k1",
        }
