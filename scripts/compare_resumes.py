# scripts/compare_resumes.py
#!/usr/bin/env python3
"""
Compare two resume versions line by line

Usage:
    python scripts/compare_resumes.py --original my_resume.txt --tailored tailored.txt
    python scripts/compare_resumes.py --original my_resume.txt --tailored tailored.txt --output reports/diff.json
    python scripts/compare_resumes.py --generation 42 --user <user_id>
"""

import argparse
import json
import sys
from pathlib import Path
from typing import List

sys.path.insert(0, str(Path(__file__).parent.parent))

from database.db_manager import DatabaseManager
from resume.diff import DiffSegment, DiffType, compute_line_diff, diff_summary

MARKERS = {
    DiffType.UNCHANGED: "  ",
    DiffType.ADDED: "+ ",
    DiffType.REMOVED: "- ",
}


def print_diff(segments: List[DiffSegment], changes_only: bool = False):
    """Print the edit script with +/- markers"""
    print("\n" + "=" * 80)
    print(f"{'RESUME DIFF':^80}")
    print("=" * 80)
    print()

    for segment in segments:
        if changes_only and segment.type == DiffType.UNCHANGED:
            continue
        print(f"{MARKERS[segment.type]}{segment.value}")

    summary = diff_summary(segments)
    print()
    print("-" * 80)
    print(f"  Unchanged: {summary['unchanged']}")
    print(f"  Added:     {summary['added']}")
    print(f"  Removed:   {summary['removed']}")
    print()


def save_diff_json(segments: List[DiffSegment], output_file: str):
    """Save diff to JSON"""
    data = {
        'summary': diff_summary(segments),
        'segments': [s.to_dict() for s in segments],
    }

    output_path = Path(output_file)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    with open(output_file, 'w', encoding='utf-8') as f:
        json.dump(data, f, indent=2, ensure_ascii=False)

    print(f"✓ Diff saved to: {output_file}")


def main():

    parser = argparse.ArgumentParser(
        description="Compare an original and a tailored resume"
    )
    parser.add_argument('--original', help='Path to original resume (plain text)')
    parser.add_argument('--tailored', help='Path to tailored resume (plain text)')
    parser.add_argument('--generation', type=int, help='Stored generation ID to diff')
    parser.add_argument('--user', help='Owner of the stored generation')
    parser.add_argument('--db', default='data/resume_tailor.db', help='Database path')
    parser.add_argument('--output', help='Save diff to JSON file')
    parser.add_argument(
        '--changes-only',
        action='store_true',
        help='Hide unchanged lines'
    )

    args = parser.parse_args()

    try:
        if args.generation is not None:
            if not args.user:
                parser.error("--generation requires --user")

            record = DatabaseManager(args.db).get_generation(args.user, args.generation)
            if record is None:
                print(f"ERROR: Generation {args.generation} not found for user {args.user}")
                sys.exit(1)
            before, after = record['original_resume'], record['generated_resume']

        elif args.original and args.tailored:
            before = Path(args.original).read_text(encoding='utf-8')
            after = Path(args.tailored).read_text(encoding='utf-8')

        else:
            parser.error("provide --original and --tailored, or --generation and --user")

        segments = compute_line_diff(before, after)
        print_diff(segments, changes_only=args.changes_only)

        if args.output:
            save_diff_json(segments, args.output)

    except (OSError, ValueError) as e:
        print(f"ERROR: {e}")
        sys.exit(1)


if __name__ == '__main__':
    main()
