"""
Link discovery module
Finds same-site links on a seed page that look like individual job posts.
"""

from typing import Dict, Set
from urllib.parse import urljoin, urlparse
import logging

from .exceptions import InvalidSeedUrlError
from .matcher import LinkKeywordFilter
from .parser import Document

logger = logging.getLogger(__name__)

DEFAULT_LINK_SELECTORS = ['article a', '.post a', '.job-listing a', 'h2 a', 'h3 a']


def normalize_seed_url(url: str) -> str:
    """Trim the seed URL and add https:// when no scheme is given"""
    url = (url or '').strip()
    if not url:
        raise InvalidSeedUrlError('Please enter a website URL.')
    if not url.startswith('http://') and not url.startswith('https://'):
        url = f"https://{url}"
    return url


def get_origin(url: str) -> str:
    """scheme://host[:port] of a URL"""
    parsed = urlparse(url)
    return f"{parsed.scheme}://{parsed.netloc}".lower()


class LinkDiscoverer:
    """Collects candidate job post URLs from a seed page"""

    def __init__(self, config: Dict = None):
        """
        Args:
            config: Link configuration (selectors, keywords)
        """
        config = config or {}
        self.selectors = config.get('selectors', DEFAULT_LINK_SELECTORS)
        self.keyword_filter = LinkKeywordFilter(config.get('keywords'))

    def _absolute_url(self, href: str, seed_url: str):
        try:
            absolute = urljoin(seed_url, href)
            parsed = urlparse(absolute)
        except ValueError as e:
            logger.debug(f"Skipping malformed link '{href}': {e}")
            return None
        if parsed.scheme not in ('http', 'https') or not parsed.netloc:
            return None
        return absolute

    def discover(self, seed_doc: Document, seed_url: str) -> Set[str]:
        """
        Scan the seed page for candidate links

        Args:
            seed_doc: Parsed seed page
            seed_url: URL of the seed page, used to resolve relative links

        Returns:
            Set of absolute same-origin URLs mentioning a job keyword
        """
        seed_origin = get_origin(seed_url)
        links = set()

        for selector in self.selectors:
            for anchor in seed_doc.select(selector):
                href = (anchor.get('href') or '').strip()
                if not href:
                    continue

                url = self._absolute_url(href, seed_url)
                if not url:
                    continue

                if get_origin(url) != seed_origin:
                    continue

                if self.keyword_filter.matches(url, seed_doc.element_text(anchor)):
                    links.add(url)

        logger.info(f"Found {len(links)} candidate links on {seed_url}")
        return links
