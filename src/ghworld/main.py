#!/usr/bin/env python3
import argparse
import json
import logging
import sys

from ghworld.config import build_settings, get_default_value
from ghworld.scheduler import build_scheduler
from ghworld.service import GlobeService
from ghworld.utils.utils import clean_message


def setup_logging(level):
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def build_parser():
    parser = argparse.ArgumentParser(
        description='ghworld - live map of public GitHub commits',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # One poll cycle
  ghworld poll --token ghp_yourtoken123

  # Run every periodic job
  ghworld serve --config config.yml

  # Profile card for a user
  ghworld profile octocat
        """
    )

    parser.add_argument(
        '--config',
        help='Path to configuration file (YAML/YML)',
        type=str
    )

    parser.add_argument(
        '--token',
        help='GitHub API token (or use GITHUB_TOKEN env variable)',
        default=get_default_value('token')
    )

    parser.add_argument(
        '--database-url',
        help='Database URL, e.g. postgresql://(psql-user):(psql-passwd)@(host)/(database)',
        default=get_default_value('database_url')
    )

    parser.add_argument(
        '--log-level',
        help='Logging level (default: INFO)',
        default=get_default_value('log_level')
    )

    subparsers = parser.add_subparsers(dest='command', required=True)
    subparsers.add_parser('poll', help='Run one poll cycle')
    subparsers.add_parser('evict', help='Delete commits outside the retention window')

    stats_parser = subparsers.add_parser('stats', help='Recompute monthly and daily stats')
    stats_parser.add_argument('--date', help='Day to recompute (YYYY-MM-DD, default: today)')

    subparsers.add_parser('serve', help='Run all periodic jobs until interrupted')
    subparsers.add_parser('live', help='Print commits from the live window')

    profile_parser = subparsers.add_parser('profile', help='Print profile stats for a user')
    profile_parser.add_argument('username')

    return parser


def run_command(args, service):
    if args.command == 'poll':
        result = service.poll()
        print("=" * 50)
        if result.rate_limited:
            print("Poll skipped: rate limited")
        elif result.error:
            print(f"Poll failed: {result.error}")
        else:
            print(f"Stored {result.stored_count} commits from {result.processed_count} events")

    elif args.command == 'evict':
        deleted = service.evict()
        print(f"Deleted {deleted} commits")

    elif args.command == 'stats':
        monthly = service.update_monthly_stats()
        daily = service.update_daily_stats(args.date)
        print("=" * 50)
        print(f"{monthly['month']}: {monthly['total_commits']} commits, "
              f"{monthly['unique_contributors']} contributors")
        print(f"{daily['date']}: {daily['total_commits']} commits, "
              f"{daily['unique_contributors']} contributors")

    elif args.command == 'serve':
        print("Starting ghworld scheduler")
        print("=" * 50)
        build_scheduler(service, service.settings, blocking=True).start()

    elif args.command == 'live':
        commits = service.get_live_commits()
        for commit in commits:
            print(f"{commit['author']:<20} {commit['repository']:<40} {clean_message(commit['message'], max_length=60)}")
        print(f"{len(commits)} live commits")

    elif args.command == 'profile':
        stats = service.get_profile_stats(args.username)
        if stats is None:
            print(f"No recent commits for {args.username}")
        else:
            print(json.dumps(stats, indent=2))


def main():
    """Main entry point"""
    parser = build_parser()
    args = parser.parse_args()

    try:
        settings = build_settings(args)
    except FileNotFoundError as e:
        print(f"Error: {e}")
        sys.exit(1)

    setup_logging(settings.log_level)
    service = GlobeService(settings)

    try:
        run_command(args, service)

    except KeyboardInterrupt:
        print("\nOperation interrupted by user")
        sys.exit(1)
    except Exception as e:
        print(f"Error: {e}")
        sys.exit(1)
    finally:
        service.close()


if __name__ == "__main__":
    main()
