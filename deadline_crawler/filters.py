"""
Deadline filtering module
Target-date and horizon filters, sorting and pagination for crawl results.
"""

import math
from dataclasses import dataclass
from datetime import date
from typing import List, Optional

from dateutil.relativedelta import relativedelta

from .models import Job, utc_today

JOBS_PER_PAGE = 10


@dataclass(frozen=True)
class Page:
    """One page of jobs"""

    jobs: List[Job]
    number: int
    total_pages: int

    @property
    def has_previous(self) -> bool:
        return self.number > 1

    @property
    def has_next(self) -> bool:
        return self.number < self.total_pages


def filter_by_target(jobs: List[Job], target: date) -> List[Job]:
    """
    Jobs closing on the target date, or on the nearest earlier date

    Exact matches win. Otherwise every job sharing the latest deadline that is
    still on or before the target is returned. Nothing on or before the target
    gives an empty list.
    """
    exact = [job for job in jobs if job.last_date == target]
    if exact:
        return exact

    candidates = [job for job in jobs if job.last_date <= target]
    if not candidates:
        return []

    nearest = max(job.last_date for job in candidates)
    return [job for job in candidates if job.last_date == nearest]


def filter_by_horizon(jobs: List[Job], months: int, today: Optional[date] = None) -> List[Job]:
    """Jobs closing within the given number of months from today"""
    limit = (today or utc_today()) + relativedelta(months=months)
    return [job for job in jobs if job.last_date <= limit]


def filter_jobs(jobs: List[Job], target: Optional[date] = None,
                horizon_months: Optional[int] = None,
                today: Optional[date] = None) -> List[Job]:
    """Apply whichever filters are given; no filter returns the jobs unchanged"""
    result = list(jobs)
    if target is not None:
        result = filter_by_target(result, target)
    if horizon_months is not None:
        result = filter_by_horizon(result, horizon_months, today)
    return result


def sort_by_deadline(jobs: List[Job]) -> List[Job]:
    """Earliest deadline first"""
    return sorted(jobs, key=lambda job: job.last_date)


def total_pages(count: int, per_page: int = JOBS_PER_PAGE) -> int:
    return max(1, math.ceil(count / per_page))


def paginate(jobs: List[Job], page: int = 1, per_page: int = JOBS_PER_PAGE) -> Page:
    """Slice out one page, clamping the page number into range"""
    if per_page < 1:
        raise ValueError(f"per_page must be positive, got {per_page}")
    pages = total_pages(len(jobs), per_page)
    number = min(max(page, 1), pages)
    start = (number - 1) * per_page
    return Page(jobs=jobs[start:start + per_page], number=number, total_pages=pages)
