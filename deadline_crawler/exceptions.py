"""
Crawler exceptions
Fatal errors abort a scan; FetchError is caught per link by the crawler.
"""


class CrawlerError(Exception):
    """Base class for crawler errors"""


class InvalidSeedUrlError(CrawlerError):
    """Seed URL is empty or unusable"""


class SeedFetchError(CrawlerError):
    """Main page could not be fetched"""

    def __init__(self, url: str, reason: str = ''):
        self.url = url
        self.reason = reason
        message = f"Could not fetch the main page content: {url}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)


class NoCandidateLinksError(CrawlerError):
    """Main page did not link to anything that looks like a job post"""

    def __init__(self, url: str):
        self.url = url
        super().__init__(
            'Could not find any potential job post links. Try a more specific URL.'
        )


class FetchError(CrawlerError):
    """A single page could not be fetched"""

    def __init__(self, url: str, reason: str = ''):
        self.url = url
        self.reason = reason
        super().__init__(f"Failed to fetch {url}: {reason}" if reason else f"Failed to fetch {url}")
