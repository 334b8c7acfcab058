"""
Page fetching module
Downloads raw HTML directly or through an allorigins-style JSON proxy.
"""

import asyncio
import logging
from typing import Dict
from urllib.parse import quote

import requests

from .exceptions import FetchError

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = (
    'Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 '
    '(KHTML, like Gecko) Chrome/91.0.4472.124 Safari/537.36'
)
DEFAULT_PROXY_URL = 'https://api.allorigins.win/get?url={url}'


class PageFetcher:
    """HTTP fetcher used by the crawler"""

    def __init__(self, config: Dict = None):
        """
        Args:
            config: Fetch configuration (timeout, use_proxy, proxy_url, user_agent)
        """
        config = config or {}
        self.timeout = config.get('timeout', 15)
        self.use_proxy = config.get('use_proxy', False)
        self.proxy_url = config.get('proxy_url') or DEFAULT_PROXY_URL
        self.session = requests.Session()
        self.session.headers.update({
            'User-Agent': config.get('user_agent') or DEFAULT_USER_AGENT
        })

    def _request_url(self, url: str) -> str:
        if self.use_proxy:
            return self.proxy_url.replace('{url}', quote(url, safe=''))
        return url

    def get_html(self, url: str) -> str:
        """Fetch a page synchronously, raising FetchError on any failure"""
        try:
            response = self.session.get(self._request_url(url), timeout=self.timeout)
            response.raise_for_status()
            if self.use_proxy:
                html = response.json().get('contents')
            else:
                html = response.text
        except requests.RequestException as e:
            raise FetchError(url, str(e)) from e
        except (ValueError, AttributeError) as e:
            raise FetchError(url, f"invalid proxy response: {e}") from e

        if not html:
            raise FetchError(url, 'empty response')
        return html

    async def fetch_page(self, url: str) -> str:
        """Fetch a page without blocking the event loop"""
        logger.debug(f"Fetching {url}")
        return await asyncio.to_thread(self.get_html, url)

    def close(self):
        self.session.close()
