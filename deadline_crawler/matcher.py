"""
Job relevance module
Scores page text and link candidates against job-related keyword lists.
"""

from typing import Dict, List
import logging

logger = logging.getLogger(__name__)

DEFAULT_RELEVANCE_KEYWORDS = [
    'qualification',
    'responsibilit',
    'experience',
    'salary',
    'location',
    'apply now',
    'job type',
]

DEFAULT_LINK_KEYWORDS = ['job', 'career', 'vacancy', 'hiring', 'position']


class RelevanceScorer:
    """Decides whether a page is plausibly a job posting"""

    def __init__(self, config: Dict = None):
        """
        Args:
            config: Relevance configuration (keywords, threshold)
        """
        config = config or {}
        self.keywords = [kw.lower() for kw in config.get('keywords', DEFAULT_RELEVANCE_KEYWORDS)]
        self.threshold = config.get('threshold', 2)

    def score(self, text: str) -> int:
        """Count how many keywords appear anywhere in the text"""
        text_lower = (text or '').lower()
        return sum(1 for keyword in self.keywords if keyword in text_lower)

    def is_relevant(self, text: str) -> bool:
        """Check if the keyword score reaches the threshold"""
        score = self.score(text)
        if score < self.threshold:
            logger.debug(f"Relevance score {score} below threshold {self.threshold}")
            return False
        return True


class LinkKeywordFilter:
    """Cheap pre-filter for candidate links before they are fetched"""

    def __init__(self, keywords: List[str] = None):
        self.keywords = [kw.lower() for kw in (keywords or DEFAULT_LINK_KEYWORDS)]

    def matches(self, url: str, text: str = '') -> bool:
        """Check if the URL or the anchor text mentions a job keyword"""
        url_lower = (url or '').lower()
        text_lower = (text or '').lower()
        for keyword in self.keywords:
            if keyword in url_lower or keyword in text_lower:
                return True
        return False
