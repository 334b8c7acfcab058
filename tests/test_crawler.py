"""
Tests for the crawl pipeline
"""

import asyncio
from datetime import date

import pytest

from deadline_crawler.crawler import JobCrawler, dedupe_jobs
from deadline_crawler.exceptions import (
    InvalidSeedUrlError,
    NoCandidateLinksError,
    SeedFetchError,
)
from deadline_crawler.models import Job
from conftest import FakeFetcher, job_page, seed_page

SEED = 'https://jobs.example.com'


def site(extra_pages=None, anchors=None):
    """Seed page linking to three posts plus any extra pages"""
    anchors = anchors or [
        ('/jobs/analyst', 'Analyst'),
        ('/jobs/clerk', 'Clerk'),
        ('/jobs/engineer', 'Engineer'),
    ]
    pages = {
        SEED: seed_page(*anchors),
        f'{SEED}/jobs/analyst': job_page(title='Data Analyst Post', deadline='Last Date: 20/05/2099'),
        f'{SEED}/jobs/clerk': job_page(title='Junior Clerk Post', deadline='Last Date: 10/05/2099'),
        f'{SEED}/jobs/engineer': job_page(title='Site Engineer Post', deadline='Closing date: 1 June 2099'),
    }
    pages.update(extra_pages or {})
    return pages


def run(crawler, url=SEED, **kwargs):
    return asyncio.run(crawler.run(url, **kwargs))


class TestRun:
    """Test end-to-end crawling"""

    def test_finds_jobs(self):
        """Test every qualifying post becomes a job"""
        crawler = JobCrawler(fetcher=FakeFetcher(site()))
        jobs = run(crawler)
        assert sorted(jobs, key=lambda job: job.link) == [
            Job('Data Analyst Post', f'{SEED}/jobs/analyst', date(2099, 5, 20)),
            Job('Junior Clerk Post', f'{SEED}/jobs/clerk', date(2099, 5, 10)),
            Job('Site Engineer Post', f'{SEED}/jobs/engineer', date(2099, 6, 1)),
        ]

    def test_seed_url_normalized(self):
        """Test a bare domain is fetched over https"""
        fetcher = FakeFetcher(site())
        jobs = run(JobCrawler(fetcher=fetcher), url='jobs.example.com')
        assert fetcher.requested[0] == SEED
        assert len(jobs) == 3

    def test_partial_failure(self):
        """Test one failing link does not abort the scan"""
        fetcher = FakeFetcher(site(), failures=[f'{SEED}/jobs/clerk'])
        jobs = run(JobCrawler(fetcher=fetcher))
        assert {job.link for job in jobs} == {f'{SEED}/jobs/analyst', f'{SEED}/jobs/engineer'}

    def test_unexpected_fetch_exception_dropped(self):
        """Test any exception from the fetcher only drops that link"""
        class BrokenFetcher(FakeFetcher):
            async def fetch_page(self, url):
                if url.endswith('/clerk'):
                    raise RuntimeError('connection reset')
                return await super().fetch_page(url)

        jobs = run(JobCrawler(fetcher=BrokenFetcher(site())))
        assert len(jobs) == 2

    def test_past_deadline_excluded(self):
        """Test expired posts are dropped even when relevant"""
        pages = site({f'{SEED}/jobs/clerk': job_page(deadline='Last Date: 10/05/2001')})
        jobs = run(JobCrawler(fetcher=FakeFetcher(pages)))
        assert f'{SEED}/jobs/clerk' not in {job.link for job in jobs}
        assert len(jobs) == 2

    def test_irrelevant_page_excluded(self):
        """Test pages failing the relevance gate are dropped"""
        pages = site({f'{SEED}/jobs/clerk': job_page(keywords=('Just a news item',))})
        jobs = run(JobCrawler(fetcher=FakeFetcher(pages)))
        assert len(jobs) == 2

    def test_untitled_post_kept(self):
        """Test a qualifying post without a heading gets the placeholder title"""
        post = '<p>Last date: 01/02/2099</p><p>Salary: 10k</p><p>Location: Goa</p>'
        pages = site({f'{SEED}/jobs/clerk': post})
        jobs = run(JobCrawler(fetcher=FakeFetcher(pages)))
        clerk = next(job for job in jobs if job.link.endswith('/clerk'))
        assert clerk.title == 'Post Title Not Found'
        assert clerk.last_date == date(2099, 2, 1)

    def test_no_jobs_is_not_an_error(self):
        """Test a scan with nothing qualifying returns an empty list"""
        pages = {
            SEED: seed_page(('/jobs/old', 'Old job')),
            f'{SEED}/jobs/old': job_page(deadline='Last Date: 01/01/2001'),
        }
        assert run(JobCrawler(fetcher=FakeFetcher(pages))) == []

    def test_status_messages(self):
        """Test each stage reports progress"""
        messages = []
        run(JobCrawler(fetcher=FakeFetcher(site())), on_status=messages.append)
        assert messages == [
            'Step 1/3: Fetching main page to find job links...',
            'Step 2/3: Analyzing 3 found links...',
            'Step 3/3: Verifying posts and extracting deadlines...',
        ]

    def test_extraction_error_dropped(self):
        """Test an exception while extracting one page skips only that page"""
        crawler = JobCrawler(fetcher=FakeFetcher(site()))
        original = crawler.extract_job

        def flaky(url, html, today):
            if url.endswith('/analyst'):
                raise AttributeError('unexpected markup')
            return original(url, html, today)

        crawler.extract_job = flaky
        jobs = run(crawler)
        assert {job.link for job in jobs} == {f'{SEED}/jobs/clerk', f'{SEED}/jobs/engineer'}


class TestFatalErrors:
    """Test errors that abort the whole scan"""

    def test_seed_unreachable(self):
        """Test a failing seed page"""
        crawler = JobCrawler(fetcher=FakeFetcher({}))
        with pytest.raises(SeedFetchError):
            run(crawler)

    def test_no_candidate_links(self):
        """Test a seed page without job-like links"""
        seed = 'https://example.org'
        pages = {seed: seed_page(('/about', 'About us'), ('https://other.com/jobs', 'Jobs'))}
        with pytest.raises(NoCandidateLinksError):
            run(JobCrawler(fetcher=FakeFetcher(pages)), url=seed)

    def test_empty_seed_url(self):
        """Test an empty URL is rejected before fetching"""
        fetcher = FakeFetcher({})
        with pytest.raises(InvalidSeedUrlError):
            run(JobCrawler(fetcher=fetcher), url='  ')
        assert fetcher.requested == []


class TestConcurrency:
    """Test concurrent fetching"""

    def test_fetches_run_concurrently(self):
        """Test all candidate links are in flight at once by default"""
        fetcher = FakeFetcher(site(), delay=0.02)
        run(JobCrawler(fetcher=fetcher))
        assert fetcher.max_in_flight == 3

    def test_concurrency_cap(self):
        """Test max_concurrency limits simultaneous fetches"""
        fetcher = FakeFetcher(site(), delay=0.02)
        crawler = JobCrawler({'crawl': {'max_concurrency': 1}}, fetcher=fetcher)
        jobs = run(crawler)
        assert fetcher.max_in_flight == 1
        assert len(jobs) == 3

    def test_fetch_timeout(self):
        """Test a slow page is dropped when a timeout is configured"""
        class SlowFetcher(FakeFetcher):
            async def fetch_page(self, url):
                if url.endswith('/engineer'):
                    await asyncio.sleep(5)
                return await super().fetch_page(url)

        crawler = JobCrawler({'crawl': {'fetch_timeout': 0.1}}, fetcher=SlowFetcher(site()))
        jobs = run(crawler)
        assert {job.link for job in jobs} == {f'{SEED}/jobs/analyst', f'{SEED}/jobs/clerk'}


class TestDedupe:
    """Test deduplication"""

    def test_first_occurrence_wins(self):
        """Test repeated links keep the first job"""
        jobs = [
            Job('First', 'https://a.com/1', date(2099, 1, 1)),
            Job('Other', 'https://a.com/2', date(2099, 1, 2)),
            Job('Second', 'https://a.com/1', date(2099, 1, 3)),
        ]
        assert dedupe_jobs(jobs) == jobs[:2]

    def test_empty(self):
        """Test empty input"""
        assert dedupe_jobs([]) == []
