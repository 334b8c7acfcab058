"""
Output module
Formats jobs for sharing and prints or saves scan results.
"""

from typing import Dict, List
from urllib.parse import quote
import logging
import os
import json
from datetime import datetime

from .filters import Page
from .models import Job

logger = logging.getLogger(__name__)


def format_deadline(job: Job) -> str:
    """Deadline as dd/mm/yyyy"""
    return job.last_date.strftime('%d/%m/%Y')


def format_share_text(job: Job) -> str:
    """Multi-line summary for clipboard or messaging apps"""
    return (
        f"📄 *Post name:* {job.title}\n\n"
        f"📅 *Last date:* {format_deadline(job)}\n\n"
        f"🔗 *Apply Link:*\n{job.link}"
    )


def whatsapp_link(job: Job) -> str:
    """wa.me link with the share text pre-filled"""
    return f"https://wa.me/?text={quote(format_share_text(job), safe='')}"


class Notifier:
    """Presents scan results"""

    def __init__(self, config: Dict = None):
        """
        Args:
            config: Output configuration dictionary
        """
        config = config or {}
        self.terminal_enabled = config.get('terminal', True)
        self.show_share_text = config.get('share_text', False)
        self.file_config = config.get('file', {}) or {}
        self.file_enabled = self.file_config.get('enabled', False)

    def notify_terminal(self, page: Page, total_jobs: int):
        """Print one page of jobs to the terminal"""
        if not self.terminal_enabled or not page.jobs:
            return

        print("\n" + "="*80)
        print(f"Upcoming deadlines found! ({total_jobs} items)")
        print("="*80)

        for job in page.jobs:
            print(f"\n- {job.title}")
            print(f"    Last Date to Apply: {format_deadline(job)}")
            print(f"    Link: {job.link}")
            if self.show_share_text:
                print(f"    WhatsApp: {whatsapp_link(job)}")

        print(f"\nPage {page.number} of {page.total_pages}")
        print("="*80 + "\n")

    def notify_file(self, jobs: List[Job]):
        """Save all jobs to a file"""
        if not self.file_enabled or not jobs:
            return

        try:
            output_dir = self.file_config.get('output_dir', 'output')
            file_format = self.file_config.get('format', 'json')  # 'json' or 'txt'

            os.makedirs(output_dir, exist_ok=True)
            timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')

            if file_format.lower() == 'json':
                filename = os.path.join(output_dir, f'job_deadlines_{timestamp}.json')
                self._save_json(jobs, filename)
            else:
                filename = os.path.join(output_dir, f'job_deadlines_{timestamp}.txt')
                self._save_text(jobs, filename)

            logger.info(f"Job deadlines saved to {filename}")

        except OSError as e:
            logger.error(f"Error saving to file: {e}")

    def _save_json(self, jobs: List[Job], filename: str):
        output_data = {
            'timestamp': datetime.now().isoformat(),
            'count': len(jobs),
            'jobs': [job.to_dict() for job in jobs]
        }

        with open(filename, 'w', encoding='utf-8') as f:
            json.dump(output_data, f, ensure_ascii=False, indent=2)

    def _save_text(self, jobs: List[Job], filename: str):
        with open(filename, 'w', encoding='utf-8') as f:
            f.write("="*80 + "\n")
            f.write(f"Upcoming deadlines ({len(jobs)} items)\n")
            f.write(f"Generated at: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}\n")
            f.write("="*80 + "\n\n")

            for job in jobs:
                f.write(format_share_text(job))
                f.write("\n\n" + "-"*80 + "\n\n")

    def notify(self, page: Page, jobs: List[Job]):
        """Send results through all enabled channels"""
        self.notify_terminal(page, len(jobs))
        self.notify_file(jobs)
