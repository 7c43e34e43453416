import json
import logging
import os
import re
from datetime import datetime, timezone
from typing import Any, Dict, Optional

SENSITIVE_PATTERNS = [
    r'(?i)(api[_-]?key|api[_-]?sign|secret|otp|password|token)(["\']?\s*[:=]\s*["\']?)[A-Za-z0-9+/=_-]{16,}',
    r"(?i)(Bearer\s+)[A-Za-z0-9+/=_-]{20,}",
]

# Kraken secrets and signatures are 88-char base64 blobs
BASE64_BLOB = r"(?<![A-Za-z0-9+/])[A-Za-z0-9+/]{40,}={0,2}"


def scrub_secrets(text: str) -> str:
    """Replace sensitive values with ***."""
    if not isinstance(text, str):
        text = str(text)
    env_secrets = [
        v
        for k, v in os.environ.items()
        if any(x in k.upper() for x in ["KEY", "SECRET", "TOKEN", "PASSWORD", "OTP"])
        and v
        and len(v) > 8
    ]
    for secret in env_secrets:
        text = text.replace(secret, "***")

    text = re.sub(SENSITIVE_PATTERNS[0], r"\1\2***", text)
    text = re.sub(SENSITIVE_PATTERNS[1], r"\1***", text)
    text = re.sub(BASE64_BLOB, "***", text)
    return text


class SensitiveDataFilter(logging.Filter):
    """Filter that scrubs sensitive data from log records."""

    def filter(self, record):
        if record.msg and isinstance(record.msg, str):
            record.msg = scrub_secrets(record.msg)
        if record.args:
            if isinstance(record.args, dict):
                record.args = {
                    k: (scrub_secrets(v) if isinstance(v, str) else v)
                    for k, v in record.args.items()
                }
            elif isinstance(record.args, tuple):
                record.args = tuple(
                    scrub_secrets(arg) if isinstance(arg, str) else arg
                    for arg in record.args
                )
        return True


class JsonFormatter(logging.Formatter):
    def format(self, record):
        log_entry = {
            "timestamp": datetime.fromtimestamp(record.created).isoformat(),
            "level": record.levelname,
            "component": record.name,
            "message": record.getMessage(),
        }
        if hasattr(record, "meta") and isinstance(record.meta, dict):
            log_entry["meta"] = record.meta

        return scrub_secrets(json.dumps(log_entry, separators=(",", ":")))


def _log_level() -> int:
    level = logging.getLevelName(os.environ.get("KRAKEN_CLIENT_LOG_LEVEL", "INFO").upper())
    # getLevelName returns "Level X" for unknown names
    return level if isinstance(level, int) else logging.INFO


def _add_file_handler(logger: logging.Logger, log_dir: str, sensitive_filter: logging.Filter) -> None:
    path = os.path.abspath(os.path.join(log_dir, "kraken_client.jsonl"))
    for h in logger.handlers:
        if isinstance(h, logging.FileHandler) and h.baseFilename == path:
            return
    os.makedirs(log_dir, exist_ok=True)
    fh = logging.FileHandler(path)
    fh.setFormatter(JsonFormatter())
    fh.addFilter(sensitive_filter)
    logger.addHandler(fh)


def setup_logger(name: str = "kraken_client", log_dir: Optional[str] = None):
    """
    Configure the package logger.

    Console output is always on. A JSON-lines file handler is added when
    `log_dir` (or KRAKEN_CLIENT_LOG_DIR) is set, also on a logger that was
    already configured without one.
    """
    logger = logging.getLogger(name)
    logger.setLevel(_log_level())
    sensitive_filter = SensitiveDataFilter()

    log_dir = log_dir or os.environ.get("KRAKEN_CLIENT_LOG_DIR")
    if log_dir:
        _add_file_handler(logger, str(log_dir), sensitive_filter)

    # Avoid duplicate console handlers
    if any(type(h) is logging.StreamHandler for h in logger.handlers):
        return logger

    ch = logging.StreamHandler()
    formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    ch.setFormatter(formatter)
    ch.addFilter(sensitive_filter)
    logger.addHandler(ch)

    return logger


# Singleton-ish instance
logger = setup_logger()


def log_event(event_type: str, data: Dict[str, Any], context: str = "kraken_call") -> None:
    """Log structured events."""
    log_entry = {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "type": event_type,
        "context": context,
        **data,
    }

    level = logging.WARNING if event_type.endswith("_error") else logging.INFO
    logger.log(
        level,
        f"[{context.upper()}] {event_type}: {json.dumps(data, separators=(',', ':'), default=str)}",
    )

    log_path = os.environ.get("KRAKEN_CLIENT_LOG_JSONL")
    if log_path:
        with open(log_path, "a", encoding="utf-8") as f:
            f.write(scrub_secrets(json.dumps(log_entry, default=str)) + "\n")
