#!/usr/bin/env python3
"""Grant or revoke the admin role of a user account."""

import argparse
import importlib
import os
import sys


def _load_app_and_models():
    """Return ``(app, db, User)`` after ensuring the repository root is importable."""

    root_dir = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
    if root_dir not in sys.path:
        sys.path.insert(0, root_dir)

    app_module = importlib.import_module("app")
    models_module = importlib.import_module("models")
    return app_module.app, models_module.db, models_module.User


app, db, User = _load_app_and_models()


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(
        description="Grant (default) or revoke the admin role of a user"
    )
    parser.add_argument("email", help="Email of the target user")
    parser.add_argument(
        "--revoke",
        action="store_true",
        help="Demote the user back to a regular account",
    )
    args = parser.parse_args(argv)

    with app.app_context():
        user = User.query.filter_by(email=args.email.strip().lower()).first()
        if not user:
            print("User not found")
            return 1
        user.role = User.ROLE_USER if args.revoke else User.ROLE_ADMIN
        db.session.commit()
        print(f"{user.email} is now '{user.role}'")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
