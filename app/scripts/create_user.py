"""
Create a user (e.g. the first admin; registration only creates clients). Run from project root:
  python -m app.scripts.create_user NAME USERNAME PASSWORD [role]
Example:
  python -m app.scripts.create_user "Shop Admin" admin your-secure-password admin
"""
import argparse
import sys

from sqlalchemy.orm import Session

from app.core.database import session_scope
from app.core.security import (
    NAME_MAX_LEN,
    PASSWORD_MAX_LEN,
    PASSWORD_MIN_LEN,
    USERNAME_MAX_LEN,
    PasswordHasher,
    get_password_hasher,
)
from app.models.user import Role, User


def create_user(
    db: Session,
    hasher: PasswordHasher,
    name: str,
    username: str,
    password: str,
    role: Role = Role.CLIENT,
) -> User | None:
    """Add a user to db; None if the username is taken. The caller commits."""
    existing = db.query(User).filter(User.username == username).first()
    if existing:
        return None
    user = User(
        name=name,
        username=username,
        password_hash=hasher.hash(password),
        role=role.value,
    )
    db.add(user)
    return user


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create a shop user (admins cannot self-register).")
    parser.add_argument("name", help=f"Display name (1-{NAME_MAX_LEN} chars)")
    parser.add_argument("username", help=f"Username (1-{USERNAME_MAX_LEN} chars)")
    parser.add_argument("password", help=f"Password ({PASSWORD_MIN_LEN}-{PASSWORD_MAX_LEN} chars)")
    parser.add_argument(
        "role",
        nargs="?",
        default=Role.CLIENT.value,
        choices=[r.value for r in Role],
    )
    args = parser.parse_args(argv)

    name = args.name.strip()
    username = args.username.strip()
    if not name or len(name) > NAME_MAX_LEN:
        print("Invalid name length.", file=sys.stderr)
        return 1
    if not username or len(username) > USERNAME_MAX_LEN:
        print("Invalid username length.", file=sys.stderr)
        return 1
    if not PASSWORD_MIN_LEN <= len(args.password) <= PASSWORD_MAX_LEN:
        print(
            f"Password must be {PASSWORD_MIN_LEN}-{PASSWORD_MAX_LEN} characters.",
            file=sys.stderr,
        )
        return 1

    with session_scope() as db:
        user = create_user(
            db,
            get_password_hasher(),
            name=name,
            username=username,
            password=args.password,
            role=Role(args.role),
        )
    if user is None:
        print(f"User '{username}' already exists.", file=sys.stderr)
        return 1
    print(f"Created user '{username}' with role '{args.role}'.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
