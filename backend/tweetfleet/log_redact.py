"""Secret redaction for log records and logged URLs."""

from __future__ import annotations

import logging
import re
import traceback
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

import httpx

SENSITIVE_QUERY_KEYS = frozenset(
    {
        "token",
        "access-token",
        "refresh-token",
        "client-secret",
        "code",
        "state",
        "secret",
        "password",
    }
)
_SENSITIVE_KEY_PATTERN = r"(?:token|access_token|refresh_token|client_secret|code|secret|password)"
_URL_PATTERN = re.compile(r"(?i)https?://[^\s\"'<>]+")
_JSON_SECRET_PATTERN = re.compile(rf"(?i)(\"{_SENSITIVE_KEY_PATTERN}\"[ \t]*:[ \t]*\")([^\"]*)(\")")
_KV_SECRET_PATTERN = re.compile(rf"(?i)(\b{_SENSITIVE_KEY_PATTERN}\b[ \t]*[=:][ \t]*)([^&\s,;\"'<>]+)")
_AUTH_HEADER_PATTERN = re.compile(r"(?i)\b(Bearer|Basic)\s+[A-Za-z0-9._~+\-/]+=*")
_SLACK_TOKEN_PATTERN = re.compile(r"\bxox[abposr]-[A-Za-z0-9-]+")

_FILTER_LOGGERS = (
    "",
    "uvicorn",
    "uvicorn.error",
    "httpx",
    "tweetfleet",
)
_HTTP_LOGGER = logging.getLogger("tweetfleet.http")


def redact_url(url: str) -> str:
    """Mask sensitive query-param values; scheme, host and path stay readable."""
    if not url or "?" not in url:
        return url
    try:
        parsed = urlsplit(url)
    except ValueError:
        return url

    pairs = parse_qsl(parsed.query, keep_blank_values=True)
    if not any(key.strip().lower().replace("_", "-") in SENSITIVE_QUERY_KEYS for key, _ in pairs):
        return url

    redacted = [
        (key, "***" if key.strip().lower().replace("_", "-") in SENSITIVE_QUERY_KEYS else value)
        for key, value in pairs
    ]
    query = urlencode(redacted, safe="*")
    return urlunsplit((parsed.scheme, parsed.netloc, parsed.path, query, parsed.fragment))


def redact_text(value: str | None) -> str | None:
    if value is None:
        return None
    text = str(value)
    text = _URL_PATTERN.sub(lambda match: redact_url(match.group(0)), text)
    text = _JSON_SECRET_PATTERN.sub(r"\1***\3", text)
    text = _KV_SECRET_PATTERN.sub(r"\1***", text)
    text = _AUTH_HEADER_PATTERN.sub(lambda match: f"{match.group(1)} ***", text)
    text = _SLACK_TOKEN_PATTERN.sub("xox*-***", text)
    return text


class SecretRedactionFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        try:
            message = record.getMessage()
        except Exception:
            message = str(record.msg)

        record.msg = redact_text(message) or ""
        record.args = ()
        if record.exc_info:
            record.exc_text = redact_text("".join(traceback.format_exception(*record.exc_info)))
        return True


def install_log_redaction() -> None:
    """Attach the redaction filter process-wide and quiet httpx request-line logging."""
    redaction_filter = SecretRedactionFilter()
    for logger_name in _FILTER_LOGGERS:
        logger = logging.getLogger(logger_name)
        if not any(isinstance(existing, SecretRedactionFilter) for existing in logger.filters):
            logger.addFilter(redaction_filter)
        for handler in logger.handlers:
            if not any(isinstance(existing, SecretRedactionFilter) for existing in handler.filters):
                handler.addFilter(redaction_filter)

    logging.getLogger("httpx").setLevel(logging.WARNING)


async def _log_http_request(request: httpx.Request) -> None:
    _HTTP_LOGGER.debug("HTTP request method=%s url=%s", request.method, redact_url(str(request.url)))


async def _log_http_response(response: httpx.Response) -> None:
    request = response.request
    _HTTP_LOGGER.info(
        "HTTP response method=%s url=%s status=%d",
        request.method,
        redact_url(str(request.url)),
        response.status_code,
    )


def httpx_event_hooks() -> dict[str, list]:
    return {
        "request": [_log_http_request],
        "response": [_log_http_response],
    }
