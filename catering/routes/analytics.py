# CATERING/backend/catering/routes/analytics.py

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from typing import Optional, List
from datetime import date
from catering.database import get_db
from catering.auth import get_current_user
from catering.models import models
from catering.schemas import schemas
from catering.services.analytics_service import AnalyticsService
from catering.services.aggregation import PeriodMode, SortBy

router = APIRouter(prefix="/analytics", tags=["analytics"])

@router.get("/events", response_model=schemas.EventProfitabilityResponse)
def get_event_profitability(
    sort_by: SortBy = Query(SortBy.PROFIT, description="Tri : profit, margin ou date"),
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user)
):
    """Rentabilité événement par événement"""
    return AnalyticsService(db, current_user.id).get_event_profitability(sort_by)

@router.get("/periods/{mode}", response_model=schemas.PeriodProfitabilityResponse)
def get_period_profitability(
    mode: PeriodMode,
    start: Optional[date] = Query(None, description="Début de la plage (mode custom)"),
    end: Optional[date] = Query(None, description="Fin de la plage (mode custom)"),
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user)
):
    """Rentabilité par jour, semaine, mois, trimestre, année, exercice ou plage"""
    try:
        service = AnalyticsService(db, current_user.id)
        return service.get_period_profitability(mode, start, end)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

@router.get("/summary", response_model=schemas.ProfitSummary)
def get_summary_stats(
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user)
):
    """Résumé des statistiques clés"""
    return AnalyticsService(db, current_user.id).get_summary_stats()

@router.get("/expenses-by-category", response_model=List[schemas.CategoryBreakdown])
def get_expenses_by_category(
    event_id: Optional[int] = None,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user)
):
    """Dépenses par catégorie avec pourcentages"""
    return AnalyticsService(db, current_user.id).get_expenses_by_category(event_id)
