#!/usr/bin/env python3
"""
Issue invite codes directly against the database.

For operators when POST /auth/invite is locked down with INVITE_ISSUER_TOKEN.

Usage:
    python issue_invite.py [count]
"""
import sys
from typing import List, Optional

from app.database import SessionLocal
from app.utils.invites import issue_invite


def main(argv: Optional[List[str]] = None, session_factory=SessionLocal) -> List[str]:
    argv = sys.argv[1:] if argv is None else argv
    count = int(argv[0]) if argv else 1
    if count < 1:
        raise SystemExit("count must be at least 1")

    db = session_factory()
    try:
        codes = [issue_invite(db) for _ in range(count)]
    finally:
        db.close()

    for code in codes:
        print(code)
    return codes


if __name__ == '__main__':
    main()
