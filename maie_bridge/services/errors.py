import json
import logging

import requests

logger = logging.getLogger(__name__)


class MaieError(Exception):
    """Base class for errors raised by the MAIE client."""


class MaieConfigError(MaieError):
    """The client is missing configuration (API key); no request was sent."""


class MaieHTTPError(MaieError):
    """MAIE answered with a non-success status."""

    def __init__(self, message, status_code, reason=None, body=None):
        super().__init__(message)
        self.status_code = status_code
        self.reason = reason
        self.body = body

    def detail(self):
        """``detail`` field of a JSON error body, if MAIE sent one."""
        if not self.body:
            return None
        try:
            data = json.loads(self.body)
        except ValueError:
            return None
        if isinstance(data, dict):
            detail = data.get("detail")
            return detail if isinstance(detail, str) else None
        return None


def handle_maie_error(err, default_msg):
    """Map a MAIE client failure to ``(http_status, message)`` for a response."""
    if isinstance(err, MaieConfigError):
        logger.error("%s: %s", default_msg, err)
        return 503, str(err)
    if isinstance(err, MaieHTTPError):
        logger.error("%s: status=%s body=%s", default_msg, err.status_code, (err.body or "")[:1000])
        return err.status_code, err.detail() or default_msg
    if isinstance(err, requests.RequestException):
        logger.error("%s: %s", default_msg, err)
        return 502, default_msg
    logger.error("%s: unexpected %s", default_msg, err)
    return 500, default_msg
