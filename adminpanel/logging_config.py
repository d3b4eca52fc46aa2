"""
Logging Configuration Module.

Provides centralized logging setup with rotating file handler.
Includes automatic masking of sensitive data (session cookies, passwords,
tokens) since the panel logs request details of logged-in backend users.
"""

import logging
import re
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional
import sys


# --- Constants ---
LOG_FILENAME = "adminpanel.log"
MAX_BYTES = 10 * 1024 * 1024  # 10 MB
BACKUP_COUNT = 5
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# --- Sensitive Data Patterns ---
SENSITIVE_KEYS = (
    "password", "secret", "token", "api_key", "apikey", "authorization", "cookie",
    "session_id", "sessionid", "be_typo_user", "fe_typo_user", "csrf_token",
)

SENSITIVE_PATTERNS = [
    # Key-value pairs with sensitive keys (password=xxx, cookie: xxx, etc.)
    (
        re.compile(
            r"(" + "|".join(SENSITIVE_KEYS) + r")"
            r"\s*[:=]\s*['\"]?([^'\"\s&;,]+)['\"]?",
            re.IGNORECASE,
        ),
        r"\1=***",
    ),
    # Bearer tokens in headers
    (
        re.compile(r"(Bearer\s+)([A-Za-z0-9\-_\.]+)", re.IGNORECASE),
        r"\1***",
    ),
    # URL query parameters with sensitive names
    (
        re.compile(r"([?&])(token|key|secret|password|session_id)=([^&\s]+)", re.IGNORECASE),
        r"\1\2=***",
    ),
]


class SensitiveDataFormatter(logging.Formatter):
    """
    Log formatter that masks sensitive data.

    Automatically detects and masks:
    - Passwords, tokens, secrets
    - Session cookies (backend and frontend user sessions)
    - Authorization headers (Bearer tokens)
    - Sensitive URL query parameters
    """

    def format(self, record: logging.LogRecord) -> str:
        """Format the log record, masking any sensitive data."""
        masked_msg = super().format(record)
        for pattern, replacement in SENSITIVE_PATTERNS:
            masked_msg = pattern.sub(replacement, masked_msg)
        return masked_msg


def mask_sensitive(text: str) -> str:
    """Apply the log masking patterns to arbitrary text."""
    for pattern, replacement in SENSITIVE_PATTERNS:
        text = pattern.sub(replacement, text)
    return text


def is_sensitive_key(key: str) -> bool:
    """Whether a parameter or header name carries credentials."""
    lowered = key.lower().replace("-", "_")
    return any(name in lowered for name in SENSITIVE_KEYS)


def get_log_path(log_dir: Optional[str] = None) -> Path:
    """
    Get the path for log files.

    Defaults to the ``logs`` directory of the project root.
    """
    logs_dir = Path(log_dir) if log_dir else Path(__file__).resolve().parent.parent / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    return logs_dir / LOG_FILENAME


def setup_logging(log_level: int | str = logging.INFO, log_dir: Optional[str] = None) -> None:
    """
    Configure application logging with rotation.

    Args:
        log_level: The logging level (default: logging.INFO).
        log_dir: Directory for the log file (default: <project>/logs).
    """
    if isinstance(log_level, str):
        log_level = logging.getLevelName(log_level.upper())
        if not isinstance(log_level, int):
            log_level = logging.INFO

    log_file_path = get_log_path(log_dir)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    # Clear existing handlers to avoid duplicates
    root_logger.handlers.clear()

    formatter = SensitiveDataFormatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    # --- File Handler (Rotating) ---
    file_handler = RotatingFileHandler(
        filename=str(log_file_path),
        maxBytes=MAX_BYTES,
        backupCount=BACKUP_COUNT,
        encoding="utf-8",
    )
    file_handler.setLevel(log_level)
    file_handler.setFormatter(formatter)
    root_logger.addHandler(file_handler)

    # --- Console Handler ---
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    root_logger.info(f"Logging initialized. Log file: {log_file_path}")

    # Suppress noisy loggers
    logging.getLogger("watchfiles").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
