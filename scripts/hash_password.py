"""
Generate a pbkdf2_sha256 hash for ADMIN_PASSWORD_HASH.

Usage:
  python scripts/hash_password.py [password]
"""
import getpass
import sys

from app.core.security import hash_password


def main() -> None:
    password = sys.argv[1] if len(sys.argv) > 1 else getpass.getpass("Admin password: ")
    if not password:
        sys.exit("Password must not be empty")
    print(hash_password(password))


if __name__ == "__main__":
    main()
