"""
Shared test helpers
"""

import asyncio
import os
import sys

# Add project root to path
project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, project_root)

import pytest

from deadline_crawler.exceptions import FetchError


def job_page(title: str = 'Assistant Engineer Recruitment',
             deadline: str = 'Last Date: 15/03/2099',
             keywords=('Qualification: Graduate', 'Experience: 2 years')) -> str:
    """HTML for a job post with a title, a deadline line and keyword paragraphs"""
    paragraphs = '\n'.join(f'<p>{line}</p>' for line in keywords)
    return f"""
    <html>
        <head><title>{title}</title></head>
        <body>
            <article>
                <h1 class="entry-title">{title}</h1>
                <div class="entry-content">
                    <p>{deadline}</p>
                    {paragraphs}
                </div>
            </article>
        </body>
    </html>
    """


def seed_page(*anchors) -> str:
    """HTML listing page; anchors are (href, text) pairs wrapped in <article>"""
    items = '\n'.join(
        f'<article><h2><a href="{href}">{text}</a></h2></article>' for href, text in anchors
    )
    return f"<html><body><main>{items}</main></body></html>"


class FakeFetcher:
    """In-memory fetcher: URL -> HTML; unknown or failing URLs raise FetchError"""

    def __init__(self, pages: dict, failures=(), delay: float = 0.0):
        self.pages = pages
        self.failures = set(failures)
        self.delay = delay
        self.requested = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def fetch_page(self, url: str) -> str:
        self.requested.append(url)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            if self.delay:
                await asyncio.sleep(self.delay)
            if url in self.failures or url not in self.pages:
                raise FetchError(url, 'not found')
            return self.pages[url]
        finally:
            self.in_flight -= 1


@pytest.fixture
def fake_fetcher_factory():
    return FakeFetcher
