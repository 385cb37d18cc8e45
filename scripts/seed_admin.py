"""Create (or reset) the bootstrap admin account.

Usage: python -m scripts.seed_admin [email] [password]
"""
import sys

from perfdesk.database import init_db, session_scope
from perfdesk.models.user import User, UserRole
from perfdesk.services import auth as auth_service


def seed(email: str = "admin@example.com", password: str = "ChangeMe123!"):
    init_db()
    with session_scope() as db:
        admin = db.query(User).filter(User.email == email).first()
        if admin is None:
            db.add(User(
                name="Admin User",
                email=email,
                hashed_password=auth_service.get_password_hash(password),
                role=UserRole.ADMIN,
                is_active=True,
            ))
            print(f"Admin user {email} created")
        else:
            admin.hashed_password = auth_service.get_password_hash(password)
            print(f"Admin user {email} already exists. Password reset.")


if __name__ == "__main__":
    seed(*sys.argv[1:3])
