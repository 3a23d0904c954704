#!/usr/bin/env python3
"""
Seed a Firestore project with the demo student and exercise lexicon.

The API seeds an empty store on its own when SEED_DEMO_DATA is on; this
script does the same ahead of time, or for a store that already has some
data (use --force).

Usage:
    python scripts/seed_demo_data.py [--dry-run] [--force]

Requires:
    - .env file with APP_ID and FIREBASE_CREDENTIALS_PATH or FIREBASE_PROJECT_ID
"""

import sys
from pathlib import Path

# Make the package importable when run from a checkout
sys.path.insert(0, str(Path(__file__).parent.parent))

from dotenv import load_dotenv

# Load environment variables
load_dotenv()

from coachboard.config.settings import get_settings
from coachboard.infrastructure.firestore.client import (
    CollectionPaths,
    FirestoreConfig,
    FirestoreConnectionError,
    create_firestore_client,
)
from coachboard.infrastructure.firestore.repositories import LexiconRepository, StudentRepository
from coachboard.infrastructure.firestore.seed import (
    DEMO_HISTORY,
    DEMO_LEXICON,
    DEMO_STUDENT,
    DEMO_WEIGHTS,
    DemoDataSeeder,
)


def seed(dry_run: bool = False, force: bool = False) -> bool:
    settings = get_settings()
    paths = CollectionPaths(app_id=settings.app_id)

    if dry_run:
        print("\n=== DRY RUN - No data will be written ===\n")
        print(f"Would write under: {paths.root}")
        print(f"  student: {DEMO_STUDENT['name']} ({len(DEMO_HISTORY)} history, {len(DEMO_WEIGHTS)} weights)")
        print(f"  lexicon: {len(DEMO_LEXICON)} exercises")
        return True

    missing = settings.validate_required_fields()
    if missing and not settings.firestore_mock_mode:
        print(f"ERROR: Missing configuration: {', '.join(missing)}")
        return False

    try:
        client = create_firestore_client(
            config=FirestoreConfig(
                app_id=settings.app_id,
                project_id=settings.firebase_project_id,
                credentials_path=settings.firebase_credentials_path,
                initial_auth_token=settings.firebase_initial_auth_token,
            ),
            mock_mode=settings.firestore_mock_mode,
        )
    except FirestoreConnectionError as e:
        print(f"ERROR connecting to Firestore: {e}")
        return False

    seeder = DemoDataSeeder(client, paths)

    if force or not StudentRepository(client, paths).list_students():
        seeder.seed_students()
        print(f"[OK] Seeded student {DEMO_STUDENT['name']}")
    else:
        print("[SKIP] Students already present (use --force to add the demo student anyway)")

    if force or not LexiconRepository(client, paths).list_entries():
        seeder.seed_lexicon()
        print(f"[OK] Seeded {len(DEMO_LEXICON)} lexicon exercises")
    else:
        print("[SKIP] Lexicon already present")

    return True


def main():
    import argparse

    parser = argparse.ArgumentParser(description='Seed Firestore with demo coaching data')
    parser.add_argument('--dry-run', action='store_true', help='Show what would be written')
    parser.add_argument('--force', action='store_true', help='Seed even if collections are not empty')
    args = parser.parse_args()

    success = seed(dry_run=args.dry_run, force=args.force)
    sys.exit(0 if success else 1)


if __name__ == '__main__':
    main()
