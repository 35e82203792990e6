"""Fetches the raw text of a recipe page: directly, and through the read proxy."""
import asyncio
import ipaddress
import logging
import re
from typing import List, Tuple
from urllib.parse import urlsplit

import httpx

from mealcart.utilities.config import IMPORT_TIMEOUT_SECONDS, IMPORT_USER_AGENT, READ_PROXY_BASE_URL

logger = logging.getLogger(__name__)

ACCEPT_HEADER = "text/html,application/xhtml+xml,text/plain;q=0.9,*/*;q=0.8"
_SCHEME_RE = re.compile(r"^[a-zA-Z][a-zA-Z\d+\-.]*:")


class RecipeFetchError(Exception):
    def __init__(self, message: str, status_code: int = 502):
        super().__init__(message)
        self.status_code = status_code


def _is_private_host(hostname: str) -> bool:
    hostname = hostname.strip("[]").lower()
    if not hostname or hostname == "localhost" or hostname.endswith(".local"):
        return True
    try:
        ip = ipaddress.ip_address(hostname)
    except ValueError:
        return False
    return ip.is_private or ip.is_loopback or ip.is_link_local or ip.is_unspecified


def normalize_import_url(raw_url) -> str:
    '''
    Returns an absolute http(s) URL, adding "https://" when no scheme is given.
    Returns "" for anything else, including private and loopback hosts.
    '''
    value = str(raw_url or "").strip()
    if not value:
        return ""
    candidate = value if _SCHEME_RE.match(value) else f"https://{value}"
    try:
        parts = urlsplit(candidate)
        hostname = parts.hostname or ""
    except ValueError:
        return ""
    if parts.scheme.lower() not in ("http", "https") or not hostname:
        return ""
    if _is_private_host(hostname):
        return ""
    return candidate


def _headers():
    return {"user-agent": IMPORT_USER_AGENT, "accept": ACCEPT_HEADER}


async def _get_text(target_url: str, label: str) -> str:
    async with httpx.AsyncClient(timeout=IMPORT_TIMEOUT_SECONDS, follow_redirects=True,
                                 headers=_headers()) as client:
        try:
            response = await client.get(target_url)
        except httpx.HTTPError as exc:
            raise RecipeFetchError(f"{label} import failed: {exc}") from exc
    if response.status_code >= 400:
        raise RecipeFetchError(f"{label} import failed with status {response.status_code}")
    if not response.text.strip():
        raise RecipeFetchError(f"{label} import response was empty")
    return response.text


async def fetch_direct(url: str) -> str:
    return await _get_text(url, "Direct")


async def fetch_via_read_proxy(url: str) -> str:
    return await _get_text(f"{READ_PROXY_BASE_URL}{url}", "Proxy")


async def fetch_recipe_sources(url: str) -> List[Tuple[str, str]]:
    """Runs both fetches; returns (label, text) for each one that succeeded, direct first."""
    results = await asyncio.gather(fetch_direct(url), fetch_via_read_proxy(url), return_exceptions=True)
    sources: List[Tuple[str, str]] = []
    for label, result in zip(("direct", "read-proxy"), results):
        if isinstance(result, RecipeFetchError):
            logger.warning("%s fetch of %s failed: %s", label, url, result)
            continue
        if isinstance(result, BaseException):
            raise result
        sources.append((label, result))
    return sources
