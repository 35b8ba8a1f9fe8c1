#!/usr/bin/env python3
"""
Bot API Docs Client - Global client management for fetching the docs page.

Fetches the HTML documentation page the schema extractor parses. Any
non-success response is a fetch failure; the parser never sees it.
"""

import os
import logging
from typing import Optional, Dict, Any

import httpx
from dotenv import load_dotenv

logger = logging.getLogger(__name__)

DEFAULT_DOCS_URL = "https://core.telegram.org/bots/api"
DEFAULT_TIMEOUT = 30.0

# Global client instance
_docs_client: Optional['BotApiDocsClient'] = None


class DocsFetchError(Exception):
    """The documentation page could not be fetched."""

    def __init__(self, url: str, status_code: int):
        self.url = url
        self.status_code = status_code
        super().__init__(f"Request to {url} failed with {status_code}")


class BotApiDocsClient:
    """
    Global docs client.
    Manages the HTTP client used to download the documentation page.
    """

    def __init__(self,
                 docs_url: Optional[str] = None,
                 timeout: Optional[float] = None,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        """
        Initialize docs client.

        Args:
            docs_url: Page URL (or from env BOT_API_DOCS_URL)
            timeout: Request timeout in seconds (or from env BOT_API_DOCS_TIMEOUT)
            transport: Override the httpx transport (tests)
        """
        self.docs_url = docs_url or os.getenv("BOT_API_DOCS_URL") or DEFAULT_DOCS_URL

        if timeout is None:
            env_timeout = os.getenv("BOT_API_DOCS_TIMEOUT")
            try:
                timeout = float(env_timeout) if env_timeout else DEFAULT_TIMEOUT
            except ValueError:
                logger.warning(f"Invalid BOT_API_DOCS_TIMEOUT value: {env_timeout}")
                timeout = DEFAULT_TIMEOUT
        self.timeout = timeout

        self.http = httpx.AsyncClient(
            headers={
                "Accept": "text/html,application/xhtml+xml",
            },
            timeout=self.timeout,
            follow_redirects=True,
            transport=transport
        )

        logger.info(f"Docs client initialized for {self.docs_url}")

    async def request(self,
                      method: str,
                      url: Optional[str] = None,
                      params: Optional[Dict[str, Any]] = None,
                      headers: Optional[Dict[str, str]] = None) -> httpx.Response:
        """
        Make an HTTP request.

        Args:
            method: HTTP method
            url: Absolute URL, defaults to the docs page
            params: Query parameters
            headers: Additional headers

        Returns:
            HTTP response
        """
        url = url or self.docs_url

        response = await self.http.request(
            method=method,
            url=url,
            params=params,
            headers=headers or {}
        )

        logger.debug(f"{method} {url} -> {response.status_code}")
        return response

    async def get(self, url: Optional[str] = None, params: Optional[Dict[str, Any]] = None, **kwargs) -> httpx.Response:
        """Convenience method for GET requests."""
        return await self.request("GET", url, params=params, **kwargs)

    async def fetch_html(self, url: Optional[str] = None) -> str:
        """
        Download the documentation page.

        Raises:
            DocsFetchError: if the response status is not a success
        """
        response = await self.get(url)
        if not response.is_success:
            raise DocsFetchError(str(response.url), response.status_code)

        logger.info(f"Fetched {len(response.text)} characters from {response.url}")
        return response.text

    async def close(self):
        """Close the HTTP client."""
        await self.http.aclose()


def get_docs_client() -> BotApiDocsClient:
    """
    Get the global docs client instance.
    Creates one if it doesn't exist.
    """
    global _docs_client

    if _docs_client is None:
        # Load environment variables
        load_dotenv()
        _docs_client = BotApiDocsClient()

    return _docs_client


def set_docs_client(client: Optional[BotApiDocsClient]):
    """Set the global docs client instance."""
    global _docs_client
    _docs_client = client


async def close_docs_client():
    """Close the global client."""
    global _docs_client
    if _docs_client:
        await _docs_client.close()
        _docs_client = None
