"""Utility script to create a user and print an access token for local testing."""

from __future__ import annotations

import argparse

from sqlalchemy.exc import SQLAlchemyError

from campusshare.infrastructure.database import SessionLocal, initialize_database
from campusshare.infrastructure.repositories import UserRepository
from campusshare.infrastructure.security import create_access_token


def parse_args() -> argparse.Namespace:
    """Parse command line arguments for user creation."""

    parser = argparse.ArgumentParser(
        description="Create a CampusShare user and print a bearer token for it.",
    )
    parser.add_argument("--name", default="Test Student", help="Full name of the user")
    parser.add_argument("--username", required=True, help="Unique username")
    parser.add_argument("--email", required=True, help="Address used for unread message emails")
    parser.add_argument("--profile-picture", default=None, help="Optional avatar URL")
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    initialize_database()

    session = SessionLocal()
    try:
        user = UserRepository(session).create(
            name=args.name,
            username=args.username,
            email=args.email,
            profile_picture=args.profile_picture,
        )
    except SQLAlchemyError as exc:
        session.rollback()
        raise SystemExit(f"Could not save the user: {exc}") from exc
    else:
        print(
            "User created:\n"
            f"  ID: {user.id}\n"
            f"  Username: {user.username}\n"
            f"  Email: {user.email}\n"
            f"  Token: {create_access_token(user.id)}"
        )
    finally:
        session.close()


if __name__ == "__main__":
    main()
