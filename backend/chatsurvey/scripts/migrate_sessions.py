"""Move legacy flat session files into the workshop subfolder.

Before survey types existed every transcript lived directly in
``data/sessions/``. Run once:

    python -m chatsurvey.scripts.migrate_sessions [--data-dir data]

Originals are left in place; remove them with ``cleanup_sessions`` after
checking the result.
"""

import argparse
import json
import shutil
import sys
from dataclasses import dataclass
from pathlib import Path

from chatsurvey.core.config import get_settings

LEGACY_SURVEY_TYPE = "workshop"


@dataclass
class MigrationResult:
    migrated: int = 0
    skipped: int = 0
    failed: int = 0

    @property
    def total(self) -> int:
        return self.migrated + self.skipped + self.failed


def legacy_files(sessions_dir: Path) -> list[Path]:
    """Transcript files sitting directly in ``sessions_dir`` (not in a survey subfolder)."""
    if not sessions_dir.is_dir():
        return []
    return sorted(p for p in sessions_dir.glob("*.json") if p.is_file())


def migrate(sessions_dir: Path) -> MigrationResult:
    target_dir = sessions_dir / LEGACY_SURVEY_TYPE
    target_dir.mkdir(parents=True, exist_ok=True)
    print(f"Workshop directory ready: {target_dir}")

    result = MigrationResult()
    for source in legacy_files(sessions_dir):
        target = target_dir / source.name
        if target.exists():
            print(f"  Skipped (already exists): {source.name}")
            result.skipped += 1
            continue

        try:
            data = json.loads(source.read_text(encoding="utf-8"))
            if not data.get("survey_type"):
                data["survey_type"] = LEGACY_SURVEY_TYPE
                target.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")
            else:
                shutil.copy2(source, target)
        except (OSError, ValueError) as e:
            print(f"  Error migrating {source.name}: {e}", file=sys.stderr)
            result.failed += 1
            continue

        print(f"  Migrated: {source.name}")
        result.migrated += 1
    return result


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--data-dir", type=Path, default=None, help="Data root (default: DATA_DIR setting)")
    args = parser.parse_args(argv)

    data_dir = args.data_dir or get_settings().data_dir
    sessions_dir = data_dir / "sessions"

    if not legacy_files(sessions_dir):
        print("No JSON files to migrate")
        return 0

    result = migrate(sessions_dir)
    print(f"\nMigrated: {result.migrated}  Skipped: {result.skipped}  Failed: {result.failed}  Total: {result.total}")
    if result.migrated:
        print(f"Original files are still in {sessions_dir}")
        print("After verifying the migration run: python -m chatsurvey.scripts.cleanup_sessions")
    return 1 if result.failed else 0


if __name__ == "__main__":
    sys.exit(main())
