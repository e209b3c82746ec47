#!/usr/bin/env python3
"""
Issue an access token for an existing user.

Useful for calling the private profile routes from curl or Postman
without going through ``POST /api/v1/auth``.

Usage:
    python create_token.py --user-id 1 --days 30
"""

import argparse

from profile_api.app.core.security import create_access_token


def main() -> None:
    ap = argparse.ArgumentParser(description="Issue a bearer token for a user id.")
    ap.add_argument("--user-id", required=True, help="Id of the user the token authenticates")
    ap.add_argument("--days", type=int, default=365, help="Token lifetime in days")
    args = ap.parse_args()
    print(create_access_token({"sub": str(args.user_id)}, expires_delta=args.days * 24 * 60 * 60))


if __name__ == "__main__":
    main()
