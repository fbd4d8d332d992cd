"""Shared async HTTP helpers used by the registry clients.

Unlike a CLI-level helper, nothing here exits or swallows transport errors:
timeouts and connection failures propagate with their original type so the
fetcher's retry predicate can classify them. A 404 is returned as a status so
callers can treat "package unknown" as an empty answer; other error statuses
raise ``RegistryHTTPError``.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, Optional, Tuple

import aiohttp

from ..constants import Constants
from ..errors import RegistryHTTPError
from .logging_utils import Timer, extra_context, is_debug_enabled, safe_url

logger = logging.getLogger(__name__)


def _request_headers(headers: Optional[Dict[str, str]]) -> Dict[str, str]:
    merged = {"User-Agent": Constants.USER_AGENT, "Accept": "application/json"}
    if headers:
        merged.update(headers)
    return merged


async def robust_get(
    url: str,
    *,
    headers: Optional[Dict[str, str]] = None,
    session: Optional[aiohttp.ClientSession] = None,
) -> Tuple[int, Dict[str, str], str]:
    """Perform a GET and return (status_code, headers, text).

    A session is created for the call when none is supplied.

    Raises:
        RegistryHTTPError: for error statuses other than 404.
    """
    safe_target = safe_url(url)
    if is_debug_enabled(logger):
        logger.debug(
            "HTTP request",
            extra=extra_context(event="http_request", component="http_client", action="GET", target=safe_target),
        )

    with Timer() as t:
        if session is None:
            timeout = aiohttp.ClientTimeout(total=Constants.REQUEST_TIMEOUT)
            async with aiohttp.ClientSession(timeout=timeout) as own_session:
                status, response_headers, text = await _get(own_session, url, headers)
        else:
            status, response_headers, text = await _get(session, url, headers)

    if is_debug_enabled(logger):
        logger.debug(
            "HTTP response",
            extra=extra_context(
                event="http_response",
                component="http_client",
                action="GET",
                status_code=status,
                duration_ms=t.duration_ms(),
                target=safe_target,
            ),
        )

    if status >= 400 and status != 404:
        raise RegistryHTTPError(status, safe_target)
    return status, response_headers, text


async def _get(
    session: aiohttp.ClientSession, url: str, headers: Optional[Dict[str, str]]
) -> Tuple[int, Dict[str, str], str]:
    async with session.get(url, headers=_request_headers(headers)) as response:
        text = await response.text()
        return response.status, dict(response.headers), text


async def get_json(
    url: str,
    *,
    headers: Optional[Dict[str, str]] = None,
    session: Optional[aiohttp.ClientSession] = None,
) -> Tuple[int, Dict[str, str], Optional[Any]]:
    """Perform a GET and parse the body as JSON.

    Returns:
        Tuple of (status_code, headers_dict, parsed_json_or_none)
    """
    status_code, response_headers, text = await robust_get(url, headers=headers, session=session)
    if status_code != 200 or not text:
        return status_code, response_headers, None
    try:
        return status_code, response_headers, json.loads(text)
    except json.JSONDecodeError:
        logger.debug(
            "JSON decode error",
            extra=extra_context(
                event="parse",
                component="http_client",
                outcome="json_decode_error",
                status_code=status_code,
                target=safe_url(url),
            ),
        )
        return status_code, response_headers, None
