"""Create the first admin account, or promote an existing account to admin.

Usage: python -m scripts.create_admin <email> [name]
The password is read from the terminal.
"""
import sys
from getpass import getpass

from db.shared_repositories import users_repository
from utils.hash_password import hash_password

def create_admin(email: str, password: str, name: str = None) -> dict:
    email = email.strip().lower()
    with users_repository.create_session() as session:
        existing = session.get_first({'email': email})
        if existing is not None:
            session.update({'id': existing.id, 'is_admin': True, 'password': hash_password(password)})
            return {'id': existing.id, 'email': email, 'created': False}
        created = session.create({
            'email': email,
            'password': hash_password(password),
            'name': name,
            'is_admin': True,
            'prod_and_store_access': True,
        })
    return {'id': created['id'], 'email': email, 'created': True}

def main():
    if len(sys.argv) < 2:
        print(__doc__)
        sys.exit(1)
    email = sys.argv[1]
    name = sys.argv[2] if len(sys.argv) > 2 else None
    password = getpass(f"Password for {email}: ")
    if not password:
        print("A password is required.")
        sys.exit(1)
    result = create_admin(email, password, name)
    print(f"{'Created' if result['created'] else 'Promoted'} admin {result['email']} ({result['id']})")

if __name__ == "__main__":
    main()
