#!/usr/bin/env python3
"""
Library catalogue -- server and admin maintenance commands.

Usage:
  python main.py serve
  python main.py seed-admin
  python main.py seed-admin --email admin@example.com --password 'S3cret!' --name "Head Librarian"
  python main.py update-admin --email new@example.com --password 'N3w!' [--old-email old@example.com]
  python main.py hash-password 'S3cret!'

Environment variables (see core/config.py):
  SECRET_KEY     Token signing key, at least 32 characters. Required unless DEBUG=true.
  DATABASE_URL   SQLAlchemy URL. Defaults to a SQLite file beside the code.
  HOST, PORT     Bind address for `serve` (default 127.0.0.1:5000).
  ADMIN_EMAIL, ADMIN_PASSWORD, ADMIN_NAME
                 Defaults for `seed-admin` and the startup admin seed.
"""

import argparse
import logging
import sys

from core.config import get_settings

logger = logging.getLogger("libcat.cli")


def _cmd_serve(args: argparse.Namespace) -> int:
    import uvicorn

    settings = get_settings()
    uvicorn.run("asgi:app", host=settings.host, port=settings.port, reload=args.reload)
    return 0


def _cmd_hash_password(args: argparse.Namespace) -> int:
    from auth.tokens import hash_password
    from core.errors import ValidationError

    try:
        print(hash_password(args.password))
    except ValidationError as exc:
        print(f"  [!] {exc.message}")
        return 1
    return 0


def _cmd_seed_admin(args: argparse.Namespace) -> int:
    from auth.seed import ensure_admin
    from auth.store import UserStore
    from core.database import Database
    from core.errors import ValidationError

    settings = get_settings()
    db = Database(settings.database_url)
    try:
        user_id = ensure_admin(
            UserStore(db),
            args.name or settings.admin_name,
            args.email or settings.admin_email,
            args.password or settings.admin_password,
        )
    except ValidationError as exc:
        print(f"  [!] {exc.message}")
        return 1
    finally:
        db.close()
    if user_id is None:
        print("  Admin not created (one already exists, or no credentials given).")
    else:
        print(f"  Admin created with id {user_id}.")
    return 0


def _cmd_update_admin(args: argparse.Namespace) -> int:
    from sqlalchemy.exc import IntegrityError

    from auth.seed import update_admin_credentials
    from auth.store import UserStore
    from core.database import Database
    from core.errors import NotFoundError, ValidationError

    settings = get_settings()
    db = Database(settings.database_url)
    try:
        admin = update_admin_credentials(UserStore(db), args.email, args.password, old_email=args.old_email)
    except NotFoundError:
        print("  [!] No admin user found. Nothing to update.")
        return 1
    except IntegrityError:
        print(f"  [!] Email '{args.email}' already belongs to another user.")
        return 1
    except ValidationError as exc:
        print(f"  [!] {exc.message}")
        return 1
    finally:
        db.close()
    print(f"  Admin updated. New login email: {admin.email}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="main.py",
        description="Library catalogue server and admin tools.",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    serve = sub.add_parser("serve", help="Run the API with uvicorn")
    serve.add_argument("--reload", action="store_true", help="Auto-reload on code changes (development)")
    serve.set_defaults(func=_cmd_serve)

    hash_pw = sub.add_parser("hash-password", help="Print a bcrypt hash for a password")
    hash_pw.add_argument("password")
    hash_pw.set_defaults(func=_cmd_hash_password)

    seed = sub.add_parser("seed-admin", help="Create the admin account if none exists")
    seed.add_argument("--email", default="")
    seed.add_argument("--password", default="")
    seed.add_argument("--name", default="")
    seed.set_defaults(func=_cmd_seed_admin)

    update = sub.add_parser("update-admin", help="Change the admin's email and password")
    update.add_argument("--email", required=True, help="New login email")
    update.add_argument("--password", required=True, help="New password")
    update.add_argument("--old-email", default="", help="Current admin email (defaults to the first admin)")
    update.set_defaults(func=_cmd_update_admin)

    return parser


def main(argv: list[str] | None = None) -> int:
    logging.basicConfig(level=logging.INFO, format="%(levelname)-5s %(name)s %(message)s")
    args = build_parser().parse_args(argv)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
