"""
Seeding script for the gesture catalog.

Purpose:
- Load the basic sign-language gestures (alphabet + greetings)
- SAFE to run multiple times (matches on nombre, won't duplicate entries)

IMPORTANT:
- This script does NOT touch user progress
- Run manually after the first deploy
"""
import sys
import os

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from sqlalchemy.orm import Session

from ensenando.db.base import Base, engine
from ensenando.db.session import SessionLocal
from ensenando.gestures.models import Gesture

ALPHABET = [chr(c) for c in range(ord("A"), ord("Z") + 1)] + ["Ñ"]

GREETINGS = [
    ("Hola", "Saludo básico"),
    ("Gracias", "Agradecimiento"),
    ("Por favor", "Petición cortés"),
    ("Buenos días", "Saludo de la mañana"),
    ("Adiós", "Despedida"),
]


def seed_gestures():
    Base.metadata.create_all(bind=engine, tables=[Gesture.__table__])
    db: Session = SessionLocal()

    try:
        existing = {name for (name,) in db.query(Gesture.nombre).all()}
        created = 0
        skipped = 0

        rows = [(f"Letra {letter}", f"Deletreo manual de la letra {letter}", "Alfabeto") for letter in ALPHABET]
        rows += [(name, desc, "Saludos") for name, desc in GREETINGS]

        for nombre, descripcion, categoria in rows:
            if nombre in existing:
                skipped += 1
                continue
            db.add(Gesture(nombre=nombre, descripcion=descripcion, categoria=categoria))
            created += 1

        db.commit()

        print("✅ Gesture seeding complete")
        print(f"   Created: {created}")
        print(f"   Skipped (already existed): {skipped}")

    except Exception as e:
        db.rollback()
        print("❌ Error while seeding gestures")
        print(str(e))
        raise
    finally:
        db.close()


if __name__ == "__main__":
    seed_gestures()
