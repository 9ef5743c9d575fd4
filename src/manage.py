"""Storefront database management CLI.

Usage:
    python src/manage.py setup-db   # Create all tables
    python src/manage.py drop-db    # Drop all tables
"""

import argparse
import sys


def setup_databases():
    from storefront.domain import init_storefront
    from storefront.utils.db import setup_db

    print("Initializing storefront domain...")
    storefront = init_storefront()
    touched = setup_db(storefront)
    if touched:
        print(f"Schema ready on: {', '.join(touched)}")
    else:
        print("No SQL providers configured; nothing to create.")


def drop_databases():
    from storefront.domain import init_storefront
    from storefront.utils.db import drop_db

    print("Initializing storefront domain...")
    storefront = init_storefront()
    touched = drop_db(storefront)
    if touched:
        print(f"Schema dropped on: {', '.join(touched)}")
    else:
        print("No SQL providers configured; nothing to drop.")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Storefront database management")
    subparsers = parser.add_subparsers(dest="command", required=True)
    subparsers.add_parser("setup-db", help="Create all database tables")
    subparsers.add_parser("drop-db", help="Drop all database tables")
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)

    if args.command == "setup-db":
        setup_databases()
    elif args.command == "drop-db":
        drop_databases()
    else:
        sys.exit(1)


if __name__ == "__main__":
    main()
