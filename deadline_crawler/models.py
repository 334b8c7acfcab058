"""
Data models
"""

from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Dict


@dataclass(frozen=True)
class Job:
    """Job posting found by a crawl. `link` is the identity."""

    title: str
    link: str
    last_date: date

    def to_dict(self) -> Dict[str, str]:
        return {
            'title': self.title,
            'link': self.link,
            'last_date': self.last_date.isoformat(),
        }


def utc_today() -> date:
    """Current calendar date in UTC"""
    return datetime.now(timezone.utc).date()
