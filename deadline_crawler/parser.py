"""
Job post parser module
Wraps fetched HTML and extracts the post title and application deadline.
"""

import re
import logging
from datetime import date
from typing import Dict, List, Optional

from bs4 import BeautifulSoup

from .dates import parse_date
from .matcher import RelevanceScorer
from .models import utc_today

logger = logging.getLogger(__name__)

INVISIBLE_TAGS = ['script', 'style', 'noscript', 'template']

DEFAULT_TITLE_SELECTORS = [
    'h1.entry-title', 'h2.entry-title', 'h1.post-title', 'h2.post-title',
    'article h1', 'main h1', '.entry-content h1', 'article h2', 'main h2',
    '.entry-content h2', '.entry-title', '.post-title',
]

TITLE_NOT_FOUND = 'Post Title Not Found'

DEFAULT_DEADLINE_TRIGGERS = [
    'last date',
    'closing date',
    'deadline',
    'apply by',
    'applications close',
    'submit by',
]


class Document:
    """Parsed HTML page with its visible text and origin URL"""

    def __init__(self, html: str, url: str = ''):
        """
        Args:
            html: Raw HTML
            url: URL the HTML was fetched from
        """
        self.url = url
        self.soup = BeautifulSoup(html or '', 'lxml')
        for tag in self.soup(INVISIBLE_TAGS):
            tag.decompose()
        self._text = None

    def select(self, selector: str) -> List:
        """All elements matching a CSS selector"""
        return self.soup.select(selector)

    def select_one(self, selector: str):
        """First element matching a CSS selector, or None"""
        return self.soup.select_one(selector)

    @staticmethod
    def element_text(element) -> str:
        """Visible text of an element with whitespace collapsed"""
        if element is None:
            return ''
        return ' '.join(element.get_text(' ').split())

    @property
    def text(self) -> str:
        """Visible text of the whole page (body when present)"""
        if self._text is None:
            root = self.soup.body or self.soup
            self._text = root.get_text('\n')
        return self._text


class TitleExtractor:
    """Finds the best-guess heading of a job post"""

    def __init__(self, config: Dict = None):
        """
        Args:
            config: Title configuration (selectors, rule, min_length, fallback)
        """
        config = config or {}
        self.selectors = config.get('selectors', DEFAULT_TITLE_SELECTORS)
        self.rule = config.get('rule', 'words')
        self.min_length = config.get('min_length', 10)
        self.fallback = config.get('fallback', TITLE_NOT_FOUND)

        if self.rule not in ('words', 'length'):
            raise ValueError(f"Unknown title rule: {self.rule}. Expected 'words' or 'length'")

    def _is_acceptable(self, text: str) -> bool:
        if self.rule == 'length':
            return len(text) > self.min_length
        return ' ' in text

    def extract(self, doc: Document) -> str:
        """Return the post title, or the fallback text when nothing fits"""
        for selector in self.selectors:
            element = doc.select_one(selector)
            if element is None:
                continue
            text = doc.element_text(element)
            if self._is_acceptable(text):
                return text

        first_h1 = doc.select_one('h1')
        if first_h1 is not None:
            text = doc.element_text(first_h1)
            if text:
                return text

        logger.debug(f"No title found for {doc.url}")
        return self.fallback


def build_deadline_pattern(triggers: List[str], max_payload_length: int = 60):
    """
    Compile the deadline regex

    The capture group is a bounded run of word/space/separator characters
    ending in 1-4 digits, right after one of the trigger phrases.
    """
    alternatives = '|'.join(
        r'\s+'.join(re.escape(word) for word in trigger.split())
        for trigger in triggers
    )
    return re.compile(
        rf'(?:{alternatives})[\s:.-]*([\w\s,./-]{{1,{max_payload_length}}}\d{{1,4}})',
        re.IGNORECASE,
    )


class DeadlineExtractor:
    """Finds the application deadline in a job post"""

    def __init__(self, config: Dict = None, scorer: Optional[RelevanceScorer] = None):
        """
        Args:
            config: Deadline configuration (triggers, max_payload_length)
            scorer: Relevance gate applied before a date is trusted
        """
        config = config or {}
        self.triggers = config.get('triggers', DEFAULT_DEADLINE_TRIGGERS)
        self.max_payload_length = config.get('max_payload_length', 60)
        self.pattern = build_deadline_pattern(self.triggers, self.max_payload_length)
        self.scorer = scorer or RelevanceScorer()

    def find_payload(self, text: str) -> Optional[str]:
        """Date text after the first trigger phrase, if any"""
        match = self.pattern.search(text or '')
        if not match:
            return None
        return match.group(1).strip()

    def extract_deadline(self, doc: Document, today: Optional[date] = None) -> Optional[date]:
        """
        Extract the deadline of a job post

        Args:
            doc: Fetched page
            today: Dates before this one are rejected (defaults to the UTC date)

        Returns:
            Deadline date, or None when the page has no deadline phrase, does not
            look like a job post, or the date is unparseable or already past
        """
        body_text = doc.text
        payload = self.find_payload(body_text)
        if payload is None:
            return None

        if not self.scorer.is_relevant(body_text):
            logger.debug(f"Skipping {doc.url}: deadline found but page does not look like a job post")
            return None

        last_date = parse_date(payload)
        if last_date is None:
            logger.debug(f"Skipping {doc.url}: could not parse deadline '{payload[:40]}'")
            return None

        today = today or utc_today()
        if last_date < today:
            logger.debug(f"Skipping {doc.url}: deadline {last_date} already passed")
            return None

        return last_date
