"""
Script to promote an existing user to administrador.
Signup never grants this role, so the first admin is created here.

Usage:
    python scripts/init_admin.py admin@example.com
"""
import sys
import os

# Add the parent directory to the path so we can import ensenando modules
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from ensenando.db.session import SessionLocal
from ensenando.auth.models import User
from ensenando.core.config import ROLE_ADMIN


def init_admin(correo: str) -> bool:
    """Set the user with this e-mail as administrador."""
    db = SessionLocal()

    try:
        user = db.query(User).filter(User.correo == correo.strip().lower()).first()

        if not user:
            print(f"ERROR: User with e-mail {correo} not found!")
            print("Please sign up first, then run this script.")
            return False

        user.rol = ROLE_ADMIN
        db.commit()

        print(f"SUCCESS: User '{user.nombre}' (ID: {user.id}) is now {ROLE_ADMIN}.")
        return True

    except Exception as e:
        db.rollback()
        print(f"ERROR: Failed to promote user: {str(e)}")
        return False
    finally:
        db.close()


if __name__ == "__main__":
    if len(sys.argv) != 2:
        print("Usage: python scripts/init_admin.py <correo>")
        sys.exit(2)

    print("Initializing administrador...")
    print("-" * 50)

    if init_admin(sys.argv[1]):
        print("-" * 50)
        print("Admin initialization complete!")
    else:
        print("-" * 50)
        print("Admin initialization failed!")
        sys.exit(1)
