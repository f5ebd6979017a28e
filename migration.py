# migration.py  -- generate / apply schema migrations without the flask CLI
#   python migration.py                 apply pending revisions
#   python migration.py -m "add x"      autogenerate a revision, then apply it
import argparse
import os

from flask_migrate import migrate as mig_migrate, upgrade as mig_upgrade

from app import create_app

MIGRATIONS_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), "migrations")


def main():
    ap = argparse.ArgumentParser(description="Apply (and optionally generate) migrations")
    ap.add_argument("-m", "--message", default=None, help="autogenerate a revision with this message first")
    args = ap.parse_args()

    app = create_app()
    with app.app_context():
        if args.message:
            print("==> generating revision...")
            mig_migrate(message=args.message, directory=MIGRATIONS_DIR)
        print("==> upgrading database...")
        mig_upgrade(directory=MIGRATIONS_DIR)
    print("done")


if __name__ == "__main__":
    main()
