#!/usr/bin/env python3
"""
Seed the default owner profile into Redis.

CLI usage:
    $ python -m bootstrap.seed_default_user \
        --app-name linkpulse --env dev \
        --host redis.example --port 6379 --db 0 \
        --user-id default-user --email owner@example.com

Behavior:
    - Idempotent: an existing user is left untouched.
    - A Redis outage is reported and the script exits with status 1; it never
      leaves partial state behind.

Args:
    --app-name (str): Application name used in the key prefix (e.g., linkpulse).
    --env (str): Environment (e.g., dev, staging, prod).
    --host (str): Redis host (default: localhost).
    --port (int): Redis port (default: 6379).
    --db (int): Redis DB index (>= 0, default: 0).
    --username (str): Optional Redis ACL username.
    --password (str): Optional Redis ACL password.
    --user-id (str): Subject of the default user (required).
    --email (str): Email of the default user (required).
"""

import sys
import argparse

from linkpulse.core.bootstrap import ensure_default_user
from linkpulse.dao.redis import UserRedisDAO
from linkpulse.dao.exceptions import DataStoreError
from linkpulse.utils.logging import initialize_logging


def _non_negative_int(name: str, value: str) -> int:
    try:
        iv = int(value)
    except ValueError:
        raise ValueError(f'--{name} must be an integer') from None
    if iv < 0:
        raise ValueError(f'--{name} must be >= 0')
    return iv


def main(argv: list[str] | None = None) -> int:
    """CLI entry point. Returns the process exit status."""
    parser = argparse.ArgumentParser(
        prog='seed_default_user.py',
        description='Create the default owner profile if it does not exist yet',
    )
    parser.add_argument('--app-name', required=True, help='Application name (e.g., linkpulse)')
    parser.add_argument('--env', required=True, help='Environment name (e.g., dev, staging, prod)')
    parser.add_argument('--host', default='localhost', help='Redis host (default: localhost)')
    parser.add_argument('--port', default='6379', help='Redis port (default: 6379)')
    parser.add_argument('--db', default='0', help='Redis DB index (>= 0, default: 0)')
    parser.add_argument('--username', default=None, help='Redis ACL username')
    parser.add_argument('--password', default=None, help='Redis ACL password')
    parser.add_argument('--user-id', required=True, help='Subject of the default user')
    parser.add_argument('--email', required=True, help='Email of the default user')

    args = parser.parse_args(argv)

    app = args.app_name.strip()
    env = args.env.strip()
    user_id = args.user_id.strip()
    email = args.email.strip()
    port = _non_negative_int('port', args.port)
    db = _non_negative_int('db', args.db)

    if not app:
        raise ValueError('Missing --app-name')
    if not env:
        raise ValueError('Missing --env')
    if not user_id:
        raise ValueError('Missing --user-id')
    if not email:
        raise ValueError('Missing --email')

    initialize_logging()

    try:
        user_dao = UserRedisDAO(
            redis_host=args.host,
            redis_port=port,
            redis_db=db,
            redis_username=args.username,
            redis_password=args.password,
            prefix=f'{app}:{env}',
        )
    except DataStoreError as e:
        print(f'Failed. {e}')
        return 1

    if not ensure_default_user(user_dao, user_id, email):
        print(f"Failed. Could not create default user '{user_id}'.")
        return 1

    print(f"Done. Default user '{user_id}' is present under {app}:{env}.")
    return 0


if __name__ == '__main__':
    sys.exit(main())
