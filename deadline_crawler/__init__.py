"""
Deadline Crawler - finds job posts with upcoming application deadlines
"""

__version__ = "1.0.0"

from .crawler import JobCrawler
from .dates import parse_date
from .filters import filter_jobs, paginate, sort_by_deadline
from .models import Job
from .notifier import Notifier, format_share_text
from .state import ScanController

__all__ = [
    'JobCrawler',
    'parse_date',
    'filter_jobs',
    'paginate',
    'sort_by_deadline',
    'Job',
    'Notifier',
    'format_share_text',
    'ScanController',
]
