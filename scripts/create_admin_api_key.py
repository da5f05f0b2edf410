"""Bootstrap an admin user and print a fresh API key for it."""
from __future__ import annotations

import argparse

from dotenv import load_dotenv

load_dotenv()

from sqlalchemy import select  # noqa: E402

from app.db import init_engine, session_scope  # noqa: E402
from app.models.api_key import ApiKey  # noqa: E402
from app.models.user import User, UserRole  # noqa: E402
from app.utils.apikey import gen_key  # noqa: E402


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--username", default="admin")
    parser.add_argument("--name", default="Station Administrator")
    args = parser.parse_args()

    init_engine()
    with session_scope() as db:
        user = db.scalar(select(User).where(User.username == args.username))
        if user is None:
            user = User(username=args.username, name=args.name, role=UserRole.admin, is_active=True)
            db.add(user)
            db.flush()
        elif user.role != UserRole.admin:
            user.role = UserRole.admin

        raw, prefix, key_hash = gen_key()
        api_key = ApiKey(
            name=f"{args.username}-{prefix}",
            prefix=prefix,
            key_hash=key_hash,
            user_id=user.id,
            is_active=True,
        )
        db.add(api_key)
        db.flush()
        user_id, key_id = user.id, api_key.id

    print("==========================================")
    print("Admin API key created")
    print("Use this key in your Authorization header:")
    print(f"    Authorization: Bearer {raw}")
    print(f"(user id: {user_id}, key id: {key_id})")
    print("==========================================")


if __name__ == "__main__":
    main()
