# CATERING/backend/catering/routes/dashboard.py

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from catering.database import get_db
from catering.auth import get_current_user
from catering.models import models as db_models
from catering.schemas import schemas
from catering.services.analytics_service import AnalyticsService

router = APIRouter(prefix="/dashboard", tags=["dashboard"])

@router.get("/", response_model=schemas.DashboardOverview)
def dashboard_summary(
    db: Session = Depends(get_db),
    current_user: db_models.User = Depends(get_current_user)
):
    """Tableau de bord : compteurs d'événements, dépenses récentes, répartition et tendance"""
    return AnalyticsService(db, current_user.id).get_dashboard()
