"""
Crawl pipeline module
Seed page -> candidate links -> concurrent fetch -> title/deadline extraction -> jobs.
"""

import asyncio
import logging
from datetime import date
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from .exceptions import NoCandidateLinksError, SeedFetchError
from .fetcher import PageFetcher
from .links import LinkDiscoverer, normalize_seed_url
from .matcher import RelevanceScorer
from .models import Job, utc_today
from .parser import DeadlineExtractor, Document, TitleExtractor

logger = logging.getLogger(__name__)

StatusCallback = Callable[[str], None]


def dedupe_jobs(jobs: Iterable[Job]) -> List[Job]:
    """Remove duplicate links, keeping the first occurrence"""
    seen_links = set()
    unique_jobs = []
    for job in jobs:
        if job.link in seen_links:
            continue
        seen_links.add(job.link)
        unique_jobs.append(job)
    return unique_jobs


class JobCrawler:
    """Finds job posts with upcoming deadlines on a website"""

    def __init__(self, config: Dict = None, fetcher=None):
        """
        Args:
            config: Full configuration dictionary
            fetcher: Object with an async fetch_page(url) -> html method
                     (defaults to PageFetcher)
        """
        config = config or {}
        crawl_config = config.get('crawl', {}) or {}

        self.fetcher = fetcher or PageFetcher(config.get('fetch', {}))
        self.link_discoverer = LinkDiscoverer(config.get('links', {}))
        self.title_extractor = TitleExtractor(config.get('title', {}))
        self.deadline_extractor = DeadlineExtractor(
            config.get('deadline', {}),
            scorer=RelevanceScorer(config.get('relevance', {}))
        )
        self.max_concurrency = crawl_config.get('max_concurrency')
        self.fetch_timeout = crawl_config.get('fetch_timeout')

    async def _fetch(self, url: str) -> str:
        if self.fetch_timeout:
            return await asyncio.wait_for(self.fetcher.fetch_page(url), self.fetch_timeout)
        return await self.fetcher.fetch_page(url)

    async def _fetch_candidate(self, url: str, semaphore: Optional[asyncio.Semaphore]) -> Tuple[str, Optional[str]]:
        """Fetch one candidate link; failures become (url, None)"""
        try:
            if semaphore is None:
                return url, await self._fetch(url)
            async with semaphore:
                return url, await self._fetch(url)
        except asyncio.TimeoutError:
            logger.warning(f"Could not fetch {url}: timed out")
        except Exception as e:
            logger.warning(f"Could not fetch {url}: {type(e).__name__}: {e}")
        return url, None

    def extract_job(self, url: str, html: str, today: date) -> Optional[Job]:
        """Build a Job from a fetched page, or None if it does not qualify"""
        doc = Document(html, url)
        last_date = self.deadline_extractor.extract_deadline(doc, today)
        if last_date is None:
            return None
        title = self.title_extractor.extract(doc)
        return Job(title=title, link=url, last_date=last_date)

    async def run(self, seed_url: str, on_status: Optional[StatusCallback] = None) -> List[Job]:
        """
        Crawl a website for job posts

        Args:
            seed_url: Page that lists or links to job posts
            on_status: Optional callback receiving progress messages

        Returns:
            Jobs with deadlines on or after today, unique by link, in no
            particular order

        Raises:
            InvalidSeedUrlError: seed_url is empty
            SeedFetchError: The seed page could not be fetched
            NoCandidateLinksError: The seed page has no job-like links
        """
        def report(message: str):
            logger.info(message)
            if on_status:
                on_status(message)

        seed_url = normalize_seed_url(seed_url)
        today = utc_today()

        report('Step 1/3: Fetching main page to find job links...')
        try:
            seed_html = await self._fetch(seed_url)
        except asyncio.TimeoutError as e:
            raise SeedFetchError(seed_url, 'timed out') from e
        except Exception as e:
            raise SeedFetchError(seed_url, str(e)) from e

        seed_doc = Document(seed_html, seed_url)
        candidate_links = self.link_discoverer.discover(seed_doc, seed_url)
        if not candidate_links:
            raise NoCandidateLinksError(seed_url)

        report(f"Step 2/3: Analyzing {len(candidate_links)} found links...")
        semaphore = asyncio.Semaphore(self.max_concurrency) if self.max_concurrency else None
        results = await asyncio.gather(
            *(self._fetch_candidate(url, semaphore) for url in sorted(candidate_links))
        )
        pages = [(url, html) for url, html in results if html is not None]
        logger.info(f"Fetched {len(pages)} of {len(candidate_links)} candidate links")

        report('Step 3/3: Verifying posts and extracting deadlines...')
        jobs = []
        for url, html in pages:
            try:
                job = self.extract_job(url, html, today)
            except Exception as e:
                logger.warning(f"Error extracting job from {url}: {e}")
                continue
            if job:
                jobs.append(job)

        jobs = dedupe_jobs(jobs)
        logger.info(f"Found {len(jobs)} jobs with upcoming deadlines")
        return jobs
