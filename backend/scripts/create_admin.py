"""CLI script to create an admin account, or promote an existing user.
Usage: python scripts/create_admin.py --name NAME --email EMAIL --password PASSWORD
"""
import sys
import argparse
import pathlib
from typing import Optional
# Ensure `backend/` is on sys.path so `app` package imports work when running this script directly
ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))
from sqlmodel import Session
from app import models, repositories
from app.auth import hash_password
from app.database import engine, create_db_and_tables
from app.services import MIN_PASSWORD_LENGTH, normalize_email


def main(email: str, name: Optional[str] = None, password: Optional[str] = None) -> int:
    """Create the admin or promote the user that already owns `email`.

    Role changes through the API need an existing admin, so the first
    one has to come from here. Returns a process exit code.
    """
    create_db_and_tables()
    try:
        email = normalize_email(email)
    except ValueError as e:
        print(e)
        return 1
    with Session(engine) as session:
        repo = repositories.UserRepository(session)
        user = repo.get_by_email(email)
        if user:
            repo.set_role(user, models.ROLE_ADMIN)
            print(f'Promoted {email} to admin')
            return 0
        if not name or not password or len(password) < MIN_PASSWORD_LENGTH:
            print(f'New admins need --name and a --password of at least {MIN_PASSWORD_LENGTH} characters')
            return 1
        repo.create(models.User(
            name=name.strip(),
            email=email,
            role=models.ROLE_ADMIN,
            password_hash=hash_password(password),
        ))
        print(f'Created admin {email}')
        return 0


if __name__ == '__main__':
    parser = argparse.ArgumentParser()
    parser.add_argument('--email', required=True, help='Email of the admin account')
    parser.add_argument('--name', help='Display name (new accounts only)')
    parser.add_argument('--password', help='Password (new accounts only)')
    args = parser.parse_args()
    sys.exit(main(args.email, name=args.name, password=args.password))
