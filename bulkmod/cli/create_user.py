"""Create a Bulkmod account directly in the database.

Values not passed as flags are prompted for; the password prompt does not
echo.
"""
import argparse
import getpass
import sys

from sqlalchemy import or_, select
from sqlalchemy.orm import Session

from bulkmod.config import settings
from bulkmod.database import Base, build_engine
from bulkmod.models import User


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bulkmod-create-user", description="Create a Bulkmod user."
    )
    parser.add_argument("--username")
    parser.add_argument("--email")
    parser.add_argument("--password")
    parser.add_argument("--database-url", default=settings.database_url)
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    username = (args.username or input("Username: ")).strip()
    email = (args.email or input("Email: ")).strip()
    password = args.password or getpass.getpass("Password: ")

    if not all([username, email, password]):
        print("Username, email and password are all required.", file=sys.stderr)
        return 1

    engine = build_engine(args.database_url)
    Base.metadata.create_all(bind=engine)
    try:
        with Session(engine) as db:
            taken = db.execute(
                select(User.id).where(
                    or_(User.email == email, User.username == username)
                )
            ).first()
            if taken:
                print(
                    f"Username {username!r} or email {email!r} is already taken.",
                    file=sys.stderr,
                )
                return 1

            user = User(username=username, email=email, password_hash="")
            user.set_password(password)
            db.add(user)
            db.commit()
            print(f"Created user {username!r} (id {user.id}).")
    finally:
        engine.dispose()
    return 0


if __name__ == "__main__":
    sys.exit(main())
