"""Marketplace database and account management CLI.

Usage:
    python src/manage.py setup-db   # Create all tables
    python src/manage.py drop-db    # Drop all tables
    python src/manage.py create-admin --email ops@example.com --password ...
"""

import argparse
import sys


def setup_databases():
    from marketplace.domain import marketplace
    from marketplace.utils.db import setup_db

    print("Initializing marketplace domain...")
    marketplace.init()
    print("Creating database schema...")
    setup_db(marketplace)
    print("Done.")


def drop_databases():
    from marketplace.domain import marketplace
    from marketplace.utils.db import drop_db

    print("Initializing marketplace domain...")
    marketplace.init()
    print("Dropping database schema...")
    drop_db(marketplace)
    print("Done.")


def create_admin(email, password, first_name="System", last_name="Admin"):
    """Register a verified system administrator (payments, refunds)."""
    from marketplace.domain import marketplace
    from marketplace.identity.account import VerifyUserEmail
    from marketplace.identity.registration import RegisterUser
    from marketplace.identity.user import UserRole

    marketplace.init()
    with marketplace.domain_context():
        user_id = marketplace.process(
            RegisterUser(
                email=email,
                first_name=first_name,
                last_name=last_name,
                password=password,
                role=UserRole.SYSTEM_ADMIN.value,
            ),
            asynchronous=False,
        )
        marketplace.process(VerifyUserEmail(user_id=user_id), asynchronous=False)
    print(f"Created system administrator {email} ({user_id}).")
    return user_id


def main(argv=None):
    parser = argparse.ArgumentParser(description="Marketplace management")
    parser.add_argument("command", choices=["setup-db", "drop-db", "create-admin"])
    parser.add_argument("--email")
    parser.add_argument("--password")
    args = parser.parse_args(argv)

    if args.command == "setup-db":
        setup_databases()
    elif args.command == "drop-db":
        drop_databases()
    elif args.command == "create-admin":
        if not (args.email and args.password):
            parser.error("create-admin needs --email and --password")
        create_admin(args.email, args.password)
    return 0


if __name__ == "__main__":
    sys.exit(main())
