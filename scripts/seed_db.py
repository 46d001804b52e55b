"""
Seed public admin accounts into Firestore.

Usage:
  - Dry run (default): python scripts/seed_db.py
  - Apply to the configured project: python scripts/seed_db.py --apply
  - Custom file: python scripts/seed_db.py --file ./public_admins.json --apply

The seed file is a JSON list of {"email", "district", "category"} objects.
Entries are validated like the admin API; emails that already have an
active scope are skipped.
"""

import argparse
import json
import logging
import os
import sys

from pydantic import ValidationError as PydanticValidationError

from app.core.errors import ValidationError
from app.models.public_admin import PublicAdminCreate

logger = logging.getLogger("seed_db")


def load_seed(path: str) -> list:
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, list):
        raise ValueError(f"{path} must contain a JSON list")
    return data


def parse_entries(entries: list) -> list:
    """Validate raw entries; invalid ones are logged and dropped."""
    parsed = []
    for index, entry in enumerate(entries):
        try:
            parsed.append(PublicAdminCreate(**entry))
        except (PydanticValidationError, TypeError) as e:
            logger.error(f"Entry {index} is invalid: {e}")
    return parsed


def apply_seed(service, requests: list, apply: bool = False) -> int:
    """Returns the number of public admins written."""
    written = 0
    for request in requests:
        logger.info(f"Preparing: {request.email} -> ({request.district}, {request.category})")
        if not apply:
            continue
        try:
            service.add_public_admin(request)
            written += 1
        except ValidationError as e:
            logger.warning(f"Skipped {request.email}: {e.message}")
    return written


def main():
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")

    parser = argparse.ArgumentParser()
    parser.add_argument("--apply", action="store_true", help="Write seed to Firestore instead of dry-run")
    parser.add_argument("--file", default=os.path.join(os.getcwd(), "public_admins.json"), help="Seed file path")
    args = parser.parse_args()

    if not os.path.exists(args.file):
        logger.error(f"Seed file not found: {args.file}")
        sys.exit(1)

    requests = parse_entries(load_seed(args.file))

    service = None
    if args.apply:
        from app.services.public_admin_service import get_public_admin_service
        service = get_public_admin_service()

    written = apply_seed(service, requests, apply=args.apply)

    if args.apply:
        logger.info(f"Seeding completed: {written} of {len(requests)} public admin(s) written.")
    else:
        logger.info("Dry run complete. Re-run with --apply to write to Firestore.")


if __name__ == "__main__":
    main()
