#!/usr/bin/env python3
"""
Job deadline crawler main script

Usage:
    python main.py newgovtjobalert.com
    python main.py https://example.com/careers --date 2025-01-15
    python main.py https://example.com/careers --within-months 6 --page 2
"""

import argparse
import asyncio
import logging
import os
import sys
from datetime import date
from typing import Optional

import yaml
from dotenv import load_dotenv

from deadline_crawler import JobCrawler, Notifier, ScanController, paginate

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def load_config(config_path: str = 'config.yaml') -> dict:
    """Load configuration file, falling back to built-in defaults"""
    if not os.path.exists(config_path):
        logger.info(f"Config file not found: {config_path}. Using defaults.")
        return {}
    try:
        with open(config_path, 'r', encoding='utf-8') as f:
            return yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        logger.error(f"Error loading config: {e}")
        raise


def apply_env_overrides(config: dict) -> dict:
    """Fill fetch settings from environment variables"""
    fetch_config = config.setdefault('fetch', {}) or {}
    config['fetch'] = fetch_config

    use_proxy = os.getenv('CRAWLER_USE_PROXY')
    if use_proxy:
        fetch_config['use_proxy'] = use_proxy.strip().lower() in ('1', 'true', 'yes')
    if os.getenv('CRAWLER_PROXY_URL'):
        fetch_config['proxy_url'] = os.getenv('CRAWLER_PROXY_URL')
    if os.getenv('CRAWLER_USER_AGENT'):
        fetch_config['user_agent'] = os.getenv('CRAWLER_USER_AGENT')
    return config


def parse_target_date(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid date: {value}. Expected YYYY-MM-DD")


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description='Find job posts with upcoming application deadlines.')
    parser.add_argument('url', help='Website to scan, e.g. newgovtjobalert.com')
    parser.add_argument('--date', type=parse_target_date, default=None,
                        help='Find jobs with deadline on, or nearest before, this date (YYYY-MM-DD)')
    parser.add_argument('--within-months', type=int, default=None,
                        help='Keep only deadlines within N months from today')
    parser.add_argument('--page', type=int, default=1, help='Result page to show')
    parser.add_argument('--config', default='config.yaml', help='Path to config file')
    parser.add_argument('--proxy', action='store_true', help='Fetch pages through the proxy')
    return parser.parse_args(argv)


async def run_scan(config: dict, url: str, target: Optional[date],
                   within_months: Optional[int], page: int) -> int:
    crawler = JobCrawler(config)
    output_config = config.get('output', {}) or {}
    controller = ScanController(crawler, per_page=output_config.get('per_page', 10))

    state = await controller.scan(url, target=target, horizon_months=within_months)
    if state.error:
        print(state.error)
        return 1

    if not state.jobs:
        print('Scan complete. No jobs with future deadlines were found.')
        return 0

    state = controller.go_to_page(page)
    notifier = Notifier(output_config)
    notifier.notify(paginate(list(state.jobs), state.page, state.per_page), list(state.jobs))
    return 0


def main(argv=None) -> int:
    """Main function"""
    load_dotenv()
    args = parse_args(argv)

    config = apply_env_overrides(load_config(args.config))
    if args.proxy:
        config['fetch']['use_proxy'] = True

    within_months = args.within_months
    if within_months is None:
        within_months = (config.get('filters', {}) or {}).get('within_months')

    return asyncio.run(run_scan(config, args.url, args.date, within_months, args.page))


if __name__ == '__main__':
    sys.exit(main())
