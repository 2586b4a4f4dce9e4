"""Pydantic request bodies for progress endpoints."""
from pydantic import BaseModel, Field


class ProgressUpdate(BaseModel):
    id_gesto: int = Field(gt=0)
    porcentaje: int = Field(ge=0, le=100)
    estado: str | None = None


class ProgressReset(BaseModel):
    id_usuario: int = Field(gt=0)
    # None resets every gesture of the user
    id_gesto: int | None = Field(default=None, gt=0)


class GestureCreate(BaseModel):
    nombre: str = Field(min_length=1, max_length=255)
    descripcion: str = ""
    categoria: str | None = None
