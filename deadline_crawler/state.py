"""
Scan state module
Immutable view state, a reducer over named actions, and a controller that
runs scans and drops results from superseded runs.
"""

import logging
from dataclasses import dataclass, replace
from datetime import date
from typing import Optional, Tuple, Union

from .crawler import JobCrawler
from .exceptions import CrawlerError
from .filters import JOBS_PER_PAGE, filter_jobs, sort_by_deadline, total_pages
from .models import Job

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScanState:
    jobs: Tuple[Job, ...] = ()
    page: int = 1
    per_page: int = JOBS_PER_PAGE
    is_loading: bool = False
    error: Optional[str] = None
    status: str = ''
    generation: int = 0

    @property
    def total_pages(self) -> int:
        return total_pages(len(self.jobs), self.per_page)

    @property
    def jobs_to_show(self) -> Tuple[Job, ...]:
        start = (self.page - 1) * self.per_page
        return self.jobs[start:start + self.per_page]


@dataclass(frozen=True)
class ScanStarted:
    generation: int


@dataclass(frozen=True)
class StatusChanged:
    generation: int
    status: str


@dataclass(frozen=True)
class ScanSucceeded:
    generation: int
    jobs: Tuple[Job, ...]


@dataclass(frozen=True)
class ScanFailed:
    generation: int
    error: str


@dataclass(frozen=True)
class PageChanged:
    page: int


Action = Union[ScanStarted, StatusChanged, ScanSucceeded, ScanFailed, PageChanged]


def reduce(state: ScanState, action: Action) -> ScanState:
    """Return the state that follows an action"""
    if isinstance(action, ScanStarted):
        return ScanState(per_page=state.per_page, is_loading=True, generation=action.generation)

    if isinstance(action, PageChanged):
        return replace(state, page=min(max(action.page, 1), state.total_pages))

    # Anything below belongs to a specific run; late messages from older runs are dropped
    if action.generation != state.generation:
        logger.debug(f"Ignoring {type(action).__name__} from stale run {action.generation}")
        return state

    if isinstance(action, StatusChanged):
        return replace(state, status=action.status)
    if isinstance(action, ScanSucceeded):
        return replace(state, jobs=tuple(action.jobs), page=1, is_loading=False, error=None, status='')
    if isinstance(action, ScanFailed):
        return replace(state, jobs=(), page=1, is_loading=False, error=action.error, status='')

    raise TypeError(f"Unknown action: {action!r}")


class ScanController:
    """Runs scans against a crawler and keeps the resulting state"""

    def __init__(self, crawler: JobCrawler, per_page: int = JOBS_PER_PAGE):
        self.crawler = crawler
        self.state = ScanState(per_page=per_page)
        self._generation = 0

    def dispatch(self, action: Action) -> ScanState:
        self.state = reduce(self.state, action)
        return self.state

    async def scan(self, seed_url: str, target: Optional[date] = None,
                   horizon_months: Optional[int] = None) -> ScanState:
        """
        Run a scan, then filter and sort its jobs by deadline

        Starting a new scan while one is running makes the older one stale:
        its results never reach the state.
        """
        self._generation += 1
        generation = self._generation
        self.dispatch(ScanStarted(generation))

        def on_status(message: str):
            self.dispatch(StatusChanged(generation, message))

        try:
            jobs = await self.crawler.run(seed_url, on_status=on_status)
        except CrawlerError as e:
            logger.error(f"Scan of {seed_url} failed: {e}")
            return self.dispatch(ScanFailed(generation, f"An error occurred: {e}"))

        jobs = sort_by_deadline(filter_jobs(jobs, target=target, horizon_months=horizon_months))
        return self.dispatch(ScanSucceeded(generation, tuple(jobs)))

    def go_to_page(self, page: int) -> ScanState:
        return self.dispatch(PageChanged(page))

    def next_page(self) -> ScanState:
        return self.go_to_page(self.state.page + 1)

    def previous_page(self) -> ScanState:
        return self.go_to_page(self.state.page - 1)
