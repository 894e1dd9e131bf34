"""Print an argon2 hash for the ADMIN_PASSWORD_HASH setting."""
import argparse
import getpass

from app.core.services.auth_service import pwd_context


def main() -> None:
    parser = argparse.ArgumentParser(description="Hash the admin password")
    parser.add_argument("--password", help="Password to hash, prompted when omitted")
    args = parser.parse_args()

    password = args.password or getpass.getpass("Admin password: ")
    print(pwd_context.hash(password))


if __name__ == "__main__":
    main()
