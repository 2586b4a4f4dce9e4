"""
Progress report rendering.
CSV layout: UTF-8 BOM, ";" delimiter, user block, blank row, gesture rows.
"""
import csv
import io

from ensenando.auth.models import User

CSV_BOM = "\ufeff"


def build_csv(user: User, progress: list[dict]) -> str:
    buf = io.StringIO()
    buf.write(CSV_BOM)
    writer = csv.writer(buf, delimiter=";", lineterminator="\n")

    writer.writerow(["Usuario", "Correo", "Rol"])
    writer.writerow([user.nombre, user.correo, user.rol])
    writer.writerow([])
    writer.writerow(["Gesto", "Porcentaje", "Estado"])
    for row in progress:
        writer.writerow([row["nombre"], row["porcentaje"], row["estado"]])

    return buf.getvalue()


def build_summary(user: User, progress: list[dict]) -> dict:
    return {
        "usuario": {"nombre": user.nombre, "correo": user.correo, "rol": user.rol},
        "progresos": [
            {
                "id_gesto": row["id_gesto"],
                "nombre": row["nombre"],
                "porcentaje": row["porcentaje"],
                "estado": row["estado"],
            }
            for row in progress
        ],
    }
