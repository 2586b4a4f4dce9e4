"""
Achievement definitions.

Single source of truth for which logros exist and when they unlock.
Ids are foreign keys in user_achievements and in the remote service:
never renumber them, only append.
"""
from dataclasses import dataclass
from typing import Callable

from ensenando.achievements.metrics import AchievementMetrics


@dataclass(frozen=True)
class AchievementDefinition:
    id: int
    title: str
    description: str
    check: Callable[[AchievementMetrics], bool]


ACHIEVEMENTS: tuple[AchievementDefinition, ...] = (
    AchievementDefinition(
        id=1,
        title="Primer Paso",
        description="Has completado tu primera actividad dentro de la app.",
        check=lambda m: m.completed >= 1,
    ),
    AchievementDefinition(
        id=2,
        title="Explorador Inicial",
        description="Navegaste por todas las secciones principales por primera vez.",
        # Heuristic: has progress and is loading achievements
        check=lambda m: m.completed >= 1,
    ),
    AchievementDefinition(
        id=3,
        title="Constancia 1 día",
        description="Iniciaste sesión y trabajaste en la app durante un día consecutivo.",
        check=lambda m: m.streak_days >= 1,
    ),
    AchievementDefinition(
        id=4,
        title="Aprendiz del Mes",
        description="Completaste 10 actividades en un mes.",
        check=lambda m: m.completed_last_30 >= 10,
    ),
    AchievementDefinition(
        id=5,
        title="Ritmo Constante",
        description="Realizaste 5 actividades seguidas sin fallar.",
        check=lambda m: m.consecutive_completed >= 5,
    ),
    AchievementDefinition(
        id=6,
        title="Dominio Inicial",
        description="Completaste el 25% del contenido disponible.",
        check=lambda m: m.completion_percentage >= 25,
    ),
    AchievementDefinition(
        id=7,
        title="Maestro en Progreso",
        description="Obtuviste 10 resultados correctos consecutivos.",
        check=lambda m: m.ten_consecutive_correct,
    ),
    AchievementDefinition(
        id=8,
        title="Perfeccionista",
        description="Lograste un 100% en una actividad completa.",
        check=lambda m: m.max_percentage == 100,
    ),
    AchievementDefinition(
        id=9,
        title="Superación Personal",
        description="Mejoraste tu rendimiento respecto a la semana anterior.",
        check=lambda m: m.average_previous_7 > 0 and m.average_last_7 > m.average_previous_7,
    ),
    AchievementDefinition(
        id=10,
        title="Rutina Semanal",
        description="Usaste la app 7 días seguidos.",
        check=lambda m: m.streak_days >= 7,
    ),
    AchievementDefinition(
        id=11,
        title="Rutina Mensual",
        description="Usaste la app 30 días consecutivos.",
        check=lambda m: m.streak_days >= 30,
    ),
    AchievementDefinition(
        id=12,
        title="Vuelta a la Acción",
        description="Regresaste después de una semana sin actividad.",
        check=lambda m: m.returned_after_week,
    ),
    AchievementDefinition(
        id=13,
        title="Participante Activo",
        description="Enviando tu primera solicitud o interacción con tutor/docente.",
        check=lambda m: m.relationships_total > 0,
    ),
    AchievementDefinition(
        id=14,
        title="Apoyo a la Comunidad",
        description="Ayudaste a otro usuario o completaste una tarea colaborativa.",
        check=lambda m: m.relationships_accepted > 0,
    ),
    AchievementDefinition(
        id=15,
        title="Reporte Perfecto",
        description="Enviaste todos tus reportes correctamente durante una semana.",
        check=lambda m: m.report_recent,
    ),
    AchievementDefinition(
        id=16,
        title="Nivel Intermedio Alcanzado",
        description="Has completado todos los contenidos del nivel básico.",
        check=lambda m: m.completion_percentage >= 50,
    ),
    AchievementDefinition(
        id=17,
        title="Nivel Avanzado Alcanzado",
        description="Has completado todos los contenidos del nivel intermedio.",
        check=lambda m: m.completion_percentage >= 75,
    ),
    AchievementDefinition(
        id=18,
        title="Dominio Total",
        description="Completaste el 100% del contenido académico de la app.",
        check=lambda m: m.completion_percentage >= 100,
    ),
)

_BY_ID = {d.id: d for d in ACHIEVEMENTS}


def get_definition(achievement_id: int) -> AchievementDefinition | None:
    return _BY_ID.get(achievement_id)
