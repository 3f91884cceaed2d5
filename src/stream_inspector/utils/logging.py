"""Secure logging configuration for stream-inspector.

Provides logging setup with credential masking. Bearer tokens and
JWT-shaped values are masked in all log output, keeping only a short
prefix and suffix.
"""

import logging
import re

from stream_inspector.parsers.jwt import mask_tokens_in_text
from stream_inspector.parsers.util import mask_token


class TokenMaskingFilter(logging.Filter):
    """Logging filter that masks credentials for security.

    JWT-shaped tokens anywhere in the message are masked, as is the value
    of any ``Bearer`` credential or ``access_token`` field.
    """

    # Patterns whose group 2 is a secret value
    CREDENTIAL_PATTERNS = [
        # Authorization: Bearer VALUE
        re.compile(r"(Bearer\s+)([^\s\"',;]+)", re.IGNORECASE),
        # access_token=VALUE, "accessToken": "VALUE"
        re.compile(r"([\"']?(?:access_token|accessToken|refresh_token)[\"']?\s*[=:]\s*[\"']?)([^\s\"',;&}]+)"),
    ]

    def filter(self, record: logging.LogRecord) -> bool:
        """Filter and mask credentials in log records.

        Args:
            record: Log record to process

        Returns:
            Always True (record is always passed through, just modified)
        """
        if record.msg:
            record.msg = self._mask(str(record.msg))
        if record.args and isinstance(record.args, tuple):
            new_args: list[object] = []
            for arg in record.args:
                if isinstance(arg, str):
                    new_args.append(self._mask(arg))
                else:
                    new_args.append(arg)
            record.args = tuple(new_args)
        return True

    def _mask(self, text: str) -> str:
        """Mask all credentials in text.

        Args:
            text: Text potentially containing credentials

        Returns:
            Text with credentials replaced by their masked form
        """
        result = mask_tokens_in_text(text)
        for pattern in self.CREDENTIAL_PATTERNS:
            result = pattern.sub(lambda m: m.group(1) + mask_token(m.group(2)), result)
        return result


def setup_logging(level: int = logging.INFO, name: str | None = None) -> logging.Logger:
    """Set up logging with credential masking.

    Args:
        level: Logging level (default: INFO)
        name: Logger name (default: "stream_inspector")

    Returns:
        Configured logger instance
    """
    logger_name = name or "stream_inspector"
    logger = logging.getLogger(logger_name)
    logger.setLevel(level)

    # Remove existing handlers to avoid duplicates
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.setLevel(level)
    formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    handler.setFormatter(formatter)
    handler.addFilter(TokenMaskingFilter())

    logger.addHandler(handler)

    return logger


def get_logger(name: str | None = None) -> logging.Logger:
    """Get a logger under the stream_inspector namespace.

    Args:
        name: Logger name suffix (e.g., "cli" for "stream_inspector.cli")

    Returns:
        Logger instance
    """
    if name:
        return logging.getLogger(f"stream_inspector.{name}")
    return logging.getLogger("stream_inspector")
