# CATERING/backend/catering/routes/reports.py

from decimal import Decimal
from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import Response
from sqlalchemy.orm import Session
from typing import Optional
from catering.database import get_db
from catering.auth import get_current_user
from catering.models import models
from catering.repository import CateringRepository
from catering.services import aggregation, export_service

router = APIRouter(prefix="/reports", tags=["reports"])

def _download(content: str, filename: str, media_type: str) -> Response:
    return Response(
        content=content,
        media_type=media_type,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'}
    )

def _csv_or_400(rows) -> str:
    try:
        return export_service.to_csv(rows)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

@router.get("/events.csv")
def export_events_csv(
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user)
):
    """Export CSV de la rentabilité de tous les événements"""
    repo = CateringRepository(db, current_user.id)
    rows = aggregation.event_profitability(repo.list_events(), repo.list_expenses())
    content = _csv_or_400(export_service.event_profit_rows(rows))
    return _download(content, export_service.export_filename("events-profitability", "csv"), "text/csv; charset=utf-8")

@router.get("/events/{event_id}/expenses.csv")
def export_event_expenses_csv(
    event_id: int,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user)
):
    """Export CSV des dépenses d'un événement"""
    repo = CateringRepository(db, current_user.id)
    event = repo.get_event(event_id)
    if not event:
        raise HTTPException(status_code=404, detail="Événement non trouvé")

    content = _csv_or_400(export_service.expense_rows(repo.list_expenses(event_id=event_id)))
    filename = export_service.export_filename(f"{event.name}-expenses", "csv")
    return _download(content, filename, "text/csv; charset=utf-8")

@router.get("/events/{event_id}/profit-loss")
def export_profit_loss(
    event_id: int,
    revenue: Optional[Decimal] = Query(None, ge=0, description="Revenu estimé (par défaut : montant réservé)"),
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user)
):
    """Rapport de profits et pertes d'un événement, en JSON téléchargeable"""
    repo = CateringRepository(db, current_user.id)
    event = repo.get_event(event_id)
    if not event:
        raise HTTPException(status_code=404, detail="Événement non trouvé")

    total_revenue = revenue if revenue is not None else event.booked_amount
    report = export_service.profit_loss_report(event.name, repo.list_expenses(event_id=event_id), total_revenue)
    filename = export_service.export_filename(f"{event.name}-report", "json")
    return _download(export_service.report_to_json(report), filename, "application/json")
