import re

from fastapi import APIRouter, Depends, HTTPException, Form
from sqlalchemy.orm import Session

from ensenando.db.session import get_db
from ensenando.auth.models import User
from ensenando.core.config import ROLE_STUDENT, ROLE_TEACHER
from ensenando.core.deps import get_current_user
from ensenando.core.security import hash_password, verify_password, create_access_token

router = APIRouter(prefix="/auth", tags=["auth"])

EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

# Administrators are promoted with scripts/init_admin.py, never self-assigned
SIGNUP_ROLES = (ROLE_STUDENT, ROLE_TEACHER)


def _normalize_email(correo: str | None) -> str:
    return (correo or "").strip().lower()


# =========================
# SIGNUP
# =========================
@router.post("/signup")
def signup(
    nombre: str = Form(...),
    correo: str = Form(...),
    password: str = Form(...),
    rol: str = Form(ROLE_STUDENT),
    db: Session = Depends(get_db),
):
    correo = _normalize_email(correo)
    nombre = nombre.strip()

    if not nombre:
        raise HTTPException(status_code=400, detail="El nombre es requerido")
    if not EMAIL_RE.match(correo):
        raise HTTPException(status_code=400, detail="Correo inválido")
    if len(password) < 6:
        raise HTTPException(status_code=400, detail="La contraseña debe tener al menos 6 caracteres")
    if rol not in SIGNUP_ROLES:
        raise HTTPException(status_code=400, detail="Rol inválido")

    if db.query(User).filter(User.correo == correo).first():
        raise HTTPException(status_code=400, detail="El correo ya está registrado")

    user = User(
        nombre=nombre,
        correo=correo,
        password_hash=hash_password(password),
        rol=rol,
    )

    db.add(user)
    db.commit()
    db.refresh(user)
    print(f"[AUTH] signup id={user.id} rol={user.rol}", flush=True)

    return {
        "success": True,
        "message": "Registro exitoso",
        "token": create_access_token(user.id, user.rol),
        "usuario": user.to_dict(),
    }


# =========================
# LOGIN
# =========================
@router.post("/login")
def login(
    correo: str = Form(...),
    password: str = Form(...),
    db: Session = Depends(get_db),
):
    user = db.query(User).filter(User.correo == _normalize_email(correo)).first()

    if not user or not verify_password(password, user.password_hash):
        print("[AUTH] Invalid credentials for:", correo, flush=True)
        raise HTTPException(status_code=401, detail="Credenciales inválidas")

    token = create_access_token(user.id, user.rol)
    print("[AUTH] Login successful for user id:", user.id, flush=True)
    return {
        "success": True,
        "message": "Login exitoso",
        "token": token,
        "usuario": user.to_dict(),
    }


@router.get("/me")
def me(user: User = Depends(get_current_user)):
    return {"success": True, "usuario": user.to_dict()}
