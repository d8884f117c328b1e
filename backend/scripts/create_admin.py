# scripts/create_admin.py
"""Create a super admin, or reset an existing account's password and role."""
import sys, os
sys.path.append(os.path.dirname(os.path.dirname(__file__)))

import argparse
from db.init_db import init_db
from db.session import SessionLocal
from services import auth as auth_service


def main():
    parser = argparse.ArgumentParser()
    parser.add_argument("email")
    parser.add_argument("password")
    parser.add_argument("--name", default="Super Admin")
    args = parser.parse_args()

    init_db()
    db = SessionLocal()
    try:
        admin = auth_service.ensure_super_admin(db, email=args.email, name=args.name, password=args.password)
        print(f"Super admin ready: {admin.email} (id={admin.id})")
    finally:
        db.close()


if __name__ == "__main__":
    main()
