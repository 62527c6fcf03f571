import json
import logging
from logging.handlers import RotatingFileHandler
import uuid

from featurefile_logging import JsonFormatter, TextFormatter, setup_logging


def _record(**extras):
    record = logging.LogRecord("featurefile.decoder", logging.WARNING, __file__, 1, "skipped %s", ("label",), None)
    for key, value in extras.items():
        setattr(record, key, value)
    return record


def test_json_formatter_always_emits_mandatory_fields():
    payload = json.loads(JsonFormatter().format(_record(feature="label", event="unsupported_type")))
    assert payload["message"] == "skipped label"
    assert payload["level"] == "WARNING"
    assert payload["feature"] == "label"
    assert payload["event"] == "unsupported_type"
    for key in ("source", "frame_count", "frame_index", "error_code"):
        assert key in payload and payload[key] is None


def test_text_formatter_appends_extras():
    text = TextFormatter("%(levelname)s %(message)s").format(_record(source="a.bin", frame_count=3))
    assert text == "WARNING skipped label | source=a.bin frame_count=3"


def test_setup_logging_is_idempotent_and_writes_file(tmp_path):
    name = f"featurefile_test_{uuid.uuid4().hex[:8]}"
    logger = setup_logging(name, level="debug", log_format="json", log_dir=str(tmp_path))
    try:
        assert setup_logging(name) is logger
        assert len(logger.handlers) == 2
        assert logger.level == logging.DEBUG
        logger.info("hello", extra={"source": "x.bin"})
        for handler in logger.handlers:
            handler.flush()
        line = (tmp_path / f"{name}.log").read_text(encoding="utf-8").strip()
        assert json.loads(line)["source"] == "x.bin"
    finally:
        for handler in list(logger.handlers):
            handler.close()
            logger.removeHandler(handler)


def test_setup_logging_passes_rotation_limits_to_file_handler(tmp_path):
    name = f"featurefile_test_{uuid.uuid4().hex[:8]}"
    logger = setup_logging(name, level="info", log_dir=str(tmp_path), max_bytes=1024, backup_count=7)
    try:
        (rotating,) = [h for h in logger.handlers if isinstance(h, RotatingFileHandler)]
        assert rotating.maxBytes == 1024
        assert rotating.backupCount == 7
    finally:
        for handler in list(logger.handlers):
            handler.close()
            logger.removeHandler(handler)
