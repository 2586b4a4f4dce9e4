"""
Configuration constants for the application.
"""
import os
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables from .env file if it exists
load_dotenv(dotenv_path=Path(__file__).resolve().parent.parent.parent / '.env')

# Roles as stored in users.rol and carried in the JWT "rol" claim.
ROLE_STUDENT = "estudiante"
ROLE_TEACHER = "docente"
ROLE_ADMIN = "administrador"
ROLES = (ROLE_STUDENT, ROLE_TEACHER, ROLE_ADMIN)

# Per-gesture learning state.
GESTURE_PENDING = "pendiente"
GESTURE_LEARNED = "aprendido"
GESTURE_STATES = (GESTURE_PENDING, GESTURE_LEARNED)

# Teacher/student relationship state.
RELATION_PENDING = "pendiente"
RELATION_ACCEPTED = "aceptado"
RELATION_REJECTED = "rechazado"
RELATION_STATES = (RELATION_PENDING, RELATION_ACCEPTED, RELATION_REJECTED)

# A gesture counts as completed at this percentage (or when marked learned).
COMPLETION_THRESHOLD = 80

# Window used by the "report generated recently" achievement.
REPORT_RECENT_WINDOW_DAYS = 7

# JWT lifetime; the mobile client keeps tokens for a week.
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", str(60 * 24 * 7)))

# Optional upstream achievement service (the PHP backend). Empty disables it
# and the local rule table becomes the catalog.
REMOTE_API_URL = os.getenv("REMOTE_API_URL", "").strip().rstrip("/")
REMOTE_API_TIMEOUT = float(os.getenv("REMOTE_API_TIMEOUT", "10"))
