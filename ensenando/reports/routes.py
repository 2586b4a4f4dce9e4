from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response
from sqlalchemy.orm import Session

from ensenando.achievements.usage import UsageTracker
from ensenando.auth.models import User
from ensenando.core.deps import get_current_user, get_usage_tracker
from ensenando.core.permissions import ensure_can_view, get_user_or_404
from ensenando.db.session import get_db
from ensenando.gestures.progress import get_progress_with_names
from ensenando.reports.builder import build_csv, build_summary

router = APIRouter(prefix="/api/reports", tags=["reports"])


@router.get("/{user_id}")
def get_report(
    user_id: int,
    formato: str = Query("pdf"),
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
    tracker: UsageTracker = Depends(get_usage_tracker),
):
    """
    Progress report for user_id as CSV (formato=csv) or JSON data.
    Marks "report generated" on the caller's usage state.
    """
    target = get_user_or_404(db, user_id)
    ensure_can_view(db, user, target)

    progress = get_progress_with_names(db, target.id)
    tracker.mark_report_generated()

    if formato == "csv":
        return Response(
            content=build_csv(target, progress).encode("utf-8"),
            media_type="text/csv; charset=utf-8",
            headers={"Content-Disposition": f'attachment; filename="reporte_{target.id}.csv"'},
        )

    return {"success": True, "message": "Reporte generado", "data": build_summary(target, progress)}
