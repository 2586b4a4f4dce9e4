"""Pydantic display model for achievements (wire names match the mobile client)."""
from pydantic import BaseModel, ConfigDict, Field


class AchievementDisplay(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: int | None = None
    achievement_id: int | None = Field(default=None, alias="id_logro")
    user_id: int | None = Field(default=None, alias="id_usuario")
    title: str | None = Field(default=None, alias="titulo")
    name: str | None = Field(default=None, alias="nombre")
    description: str | None = Field(default=None, alias="descripcion")
    unlocked: bool | None = Field(default=False, alias="desbloqueado")
    progress: int | None = Field(default=None, alias="porcentajeAvance")
    unlocked_at: str | None = Field(default=None, alias="fechaDesbloqueo")
    obtained_at: str | None = Field(default=None, alias="fecha_obtenido")

    @property
    def resolved_id(self) -> int:
        if self.achievement_id is not None:
            return self.achievement_id
        if self.id is not None:
            return self.id
        return -1

    def to_wire(self) -> dict:
        return self.model_dump(by_alias=True)
