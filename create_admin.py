# create_admin.py
"""
Create (or promote) an ADMIN account.
  python create_admin.py admin@example.com 'a-long-password' --first-name Site --last-name Admin
"""
import argparse

from app import create_app
from extensions import db
from models.enums import Role
from models.user import User


def main():
    ap = argparse.ArgumentParser(description="Create an ADMIN user")
    ap.add_argument("email")
    ap.add_argument("password")
    ap.add_argument("--first-name", default="Site")
    ap.add_argument("--last-name", default="Admin")
    args = ap.parse_args()

    app = create_app()
    with app.app_context():
        email = args.email.strip().lower()
        u = User.query.filter_by(email=email).first()
        if u is None:
            u = User(first_name=args.first_name, last_name=args.last_name, email=email, role=Role.ADMIN)
            u.set_password(args.password)
            db.session.add(u)
            db.session.commit()
            print(f"admin created: {email}")
        elif u.role != Role.ADMIN:
            u.role = Role.ADMIN
            db.session.commit()
            print(f"existing user promoted to admin: {email}")
        else:
            print(f"admin already exists: {email}")


if __name__ == "__main__":
    main()
