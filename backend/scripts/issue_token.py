from __future__ import annotations

import argparse
import datetime as dt

from marketwatch.api.deps import get_identity_repo
from marketwatch.db import init_db
from marketwatch.domain.identity import AppRole


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create a user (if needed) and print a fresh access token.")
    parser.add_argument("--email", help="create a new user with this email")
    parser.add_argument("--user-id", help="issue a token for an existing user")
    parser.add_argument("--role", action="append", choices=[r.value for r in AppRole], default=None)
    parser.add_argument("--ttl-hours", type=float, default=None)
    args = parser.parse_args(argv)

    if bool(args.email) == bool(args.user_id):
        parser.error("pass exactly one of --email or --user-id")

    init_db()
    identity = get_identity_repo()

    user_id = args.user_id
    if args.email:
        roles = tuple(AppRole(r) for r in args.role) if args.role else (AppRole.INVESTOR,)
        user_id = identity.add_user(email=args.email, roles=roles)
        print(f"user_id={user_id}")

    ttl = dt.timedelta(hours=args.ttl_hours) if args.ttl_hours else None
    print(f"token={identity.issue_token(user_id=user_id, ttl=ttl)}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
