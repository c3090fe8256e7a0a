# scripts/manage_users.py
#!/usr/bin/env python3
"""
Manage accounts of the resume tailoring service

Usage:
    python scripts/manage_users.py list
    python scripts/manage_users.py stats
    python scripts/manage_users.py grant-pro user@example.com
    python scripts/manage_users.py revoke-pro user@example.com
    python scripts/manage_users.py reset-usage user@example.com
"""

import argparse
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from database.db_manager import DatabaseManager


def list_users(db: DatabaseManager):
    """List all accounts"""
    users = db.list_users()

    if not users:
        print("No users found")
        return

    print("\n" + "=" * 100)
    print(f"{'USERS':^100}")
    print("=" * 100)
    print()
    print(f"{'Email':<40}{'Plan':<8}{'Used':>6}{'Stored':>8}  {'Created':<20}")
    print("-" * 100)

    for user in users:
        plan = "pro" if user['is_pro'] else "free"
        print(
            f"{user['email']:<40}{plan:<8}{user['resume_count']:>6}"
            f"{user['generation_count']:>8}  {user['created_at'] or '':<20}"
        )
    print()


def show_stats(db: DatabaseManager):
    """Print overview statistics"""
    stats = db.get_statistics()

    print("\n" + "=" * 60)
    print(f"{'SERVICE STATISTICS':^60}")
    print("=" * 60)
    print()
    print(f"  Total Users:        {stats['total_users']}")
    print(f"  Pro / Free:         {stats['pro_users']} / {stats['free_users']}")
    print(f"  Conversion Rate:    {stats['conversion_rate']}%")
    print(f"  Total Generations:  {stats['total_generations']}")
    print(f"  Avg per User:       {stats['avg_generations_per_user']}")
    print(f"  New Users (7d):     {stats['recent_users']}")
    print(f"  Generations (7d):   {stats['recent_generations']}")
    print()


def main():
    parser = argparse.ArgumentParser(description="Manage service accounts")
    parser.add_argument('--db', default='data/resume_tailor.db', help='Database path')

    subparsers = parser.add_subparsers(dest='command', help='Command')
    subparsers.add_parser('list', help='List all users')
    subparsers.add_parser('stats', help='Show statistics')

    for command, help_text in (
        ('grant-pro', 'Give a user unlimited generations'),
        ('revoke-pro', 'Move a user back to the free plan'),
        ('reset-usage', 'Reset a user\'s generation counter'),
    ):
        sub = subparsers.add_parser(command, help=help_text)
        sub.add_argument('email', help='Account email')

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(1)

    db = DatabaseManager(args.db)

    if args.command == 'list':
        list_users(db)
        return
    if args.command == 'stats':
        show_stats(db)
        return

    user = db.get_user_by_email(args.email.strip().lower())
    if user is None:
        print(f"ERROR: No user with email {args.email}")
        sys.exit(1)

    if args.command == 'grant-pro':
        db.set_pro_status(user['user_id'], True)
        print(f"✓ {user['email']} is now Pro")
    elif args.command == 'revoke-pro':
        db.set_pro_status(user['user_id'], False)
        print(f"✓ {user['email']} is now on the free plan")
    elif args.command == 'reset-usage':
        db.reset_usage(user['user_id'])
        print(f"✓ Usage counter reset for {user['email']}")


if __name__ == '__main__':
    main()
