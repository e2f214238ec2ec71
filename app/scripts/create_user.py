"""
Create a user account from the command line and print its access token. Run from project root:
  python -m app.scripts.create_user ID TYPE USERNAME PASSWORD [--recovery-mail MAIL] [--active-day DAY]
Example:
  python -m app.scripts.create_user u-001 admin alice your-secure-password
"""
import argparse
import logging
import sys

from dotenv import load_dotenv

from app.core.config import get_settings
from app.core.context import build_context
from app.schemas.user import UserCreate
from app.services.accounts import AccountError, create_account
from app.services.user_store import UserStore

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create a user account.")
    parser.add_argument("id", help="Caller-chosen unique user id")
    parser.add_argument("type", help="Free-form account type, e.g. admin")
    parser.add_argument("username", help="Unique username")
    parser.add_argument("password", help="Plain-text password (stored hashed)")
    parser.add_argument("--recovery-mail", default=None)
    parser.add_argument("--active-day", default=None)
    args = parser.parse_args(argv)

    ctx = build_context(get_settings())
    db = ctx.session_factory()
    try:
        user, token = create_account(
            UserStore(db),
            ctx.hasher,
            ctx.tokens,
            UserCreate(
                id=args.id.strip(),
                type=args.type.strip(),
                username=args.username.strip(),
                password=args.password,
                recovery_mail=args.recovery_mail,
                active_day=args.active_day,
            ),
        )
    except AccountError as e:
        print(e.message, file=sys.stderr)
        return 1
    finally:
        db.close()
        ctx.dispose()
    print(f"Created user '{user.username}' (id={user.id}).")
    print(f"Access token: {token}")
    return 0


if __name__ == "__main__":
    load_dotenv()
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%SZ",
    )
    sys.exit(main())
