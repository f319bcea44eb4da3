"""
사용자 비밀번호 재설정
Usage: python scripts/reset_password.py <username> <new_password>

종료 코드: 0 성공 / 1 사용법 오류 / 2 사용자 없음 / 3 기타 오류
"""
import argparse
import os
import sys

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from app.database import SessionLocal, create_tables  # noqa: E402
from app.services.user_service import UserService  # noqa: E402
from app.utils.exceptions import AppException, NotFoundException  # noqa: E402


def main(argv=None, session_factory=SessionLocal) -> int:
    parser = argparse.ArgumentParser(description="Reset a user's password")
    parser.add_argument("username")
    parser.add_argument("new_password")
    try:
        args = parser.parse_args(argv)
    except SystemExit:
        return 1

    if session_factory is SessionLocal:
        create_tables()

    db = session_factory()
    try:
        UserService.reset_password(db, args.username, args.new_password)
    except NotFoundException:
        print(f"User not found: {args.username}", file=sys.stderr)
        return 2
    except AppException as e:
        print(f"Error: {e.detail}", file=sys.stderr)
        return 3
    finally:
        db.close()

    print(f"Password for {args.username} updated successfully.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
