"""Delete legacy flat session files once the migration has been verified.

    python -m chatsurvey.scripts.cleanup_sessions [--data-dir data] [--yes]

Only files directly in ``data/sessions/`` are touched; survey subfolders are
never entered.
"""

import argparse
import sys
from pathlib import Path

from chatsurvey.core.config import get_settings
from chatsurvey.scripts.migrate_sessions import legacy_files


def cleanup(sessions_dir: Path) -> int:
    deleted = 0
    for path in legacy_files(sessions_dir):
        try:
            path.unlink()
        except OSError as e:
            print(f"  Error deleting {path.name}: {e}", file=sys.stderr)
            continue
        print(f"  Deleted: {path.name}")
        deleted += 1
    return deleted


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--data-dir", type=Path, default=None, help="Data root (default: DATA_DIR setting)")
    parser.add_argument("--yes", action="store_true", help="Skip the confirmation prompt")
    args = parser.parse_args(argv)

    data_dir = args.data_dir or get_settings().data_dir
    sessions_dir = data_dir / "sessions"

    files = legacy_files(sessions_dir)
    if not files:
        print("No JSON files to clean up")
        return 0

    print(f"Found {len(files)} JSON file(s) in {sessions_dir}")
    if not args.yes:
        answer = input("This will DELETE the old session files. Have you verified the migration? (yes/no): ")
        if answer.strip().lower() != "yes":
            print("Cleanup cancelled")
            return 0

    deleted = cleanup(sessions_dir)
    print(f"\nCleanup complete. Deleted {deleted} file(s).")
    return 0


if __name__ == "__main__":
    sys.exit(main())
