# CATERING/backend/catering/routes/events.py

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from typing import List
from catering.models import models as db_models
from catering.schemas import schemas
from catering.database import get_db
from catering.auth import get_current_user
from catering.repository import CateringRepository
from catering.services.analytics_service import AnalyticsService

router = APIRouter(prefix="/events", tags=["events"])

NULLABLE_FIELDS = {"client_name", "location", "notes"}

@router.post("/", response_model=schemas.EventOut, status_code=201)
def create_event(
    event: schemas.EventCreate,
    db: Session = Depends(get_db),
    current_user: db_models.User = Depends(get_current_user)
):
    """Créer un nouvel événement pour l'utilisateur connecté"""
    repo = CateringRepository(db, current_user.id)
    return repo.upsert_event(event.model_dump())

@router.get("/", response_model=List[schemas.EventOut])
def list_events(
    db: Session = Depends(get_db),
    current_user: db_models.User = Depends(get_current_user)
):
    """Événements de l'utilisateur, du plus récent au plus ancien"""
    return CateringRepository(db, current_user.id).list_events()

@router.get("/{event_id}", response_model=schemas.EventWithTotals)
def get_event(
    event_id: int,
    db: Session = Depends(get_db),
    current_user: db_models.User = Depends(get_current_user)
):
    """Détails d'un événement avec dépenses, profit et marge"""
    event = CateringRepository(db, current_user.id).get_event(event_id)
    if not event:
        raise HTTPException(status_code=404, detail="Événement non trouvé")

    totals = AnalyticsService(db, current_user.id).get_event_totals(event)
    return {
        **schemas.EventOut.model_validate(event).model_dump(),
        **totals
    }

@router.put("/{event_id}", response_model=schemas.EventOut)
def update_event(
    event_id: int,
    event: schemas.EventUpdate,
    db: Session = Depends(get_db),
    current_user: db_models.User = Depends(get_current_user)
):
    """Modifier un événement (seuls les champs fournis changent)"""
    # null n'est accepté que pour les champs facultatifs
    data = {
        k: v for k, v in event.model_dump(exclude_unset=True).items()
        if v is not None or k in NULLABLE_FIELDS
    }
    updated = CateringRepository(db, current_user.id).upsert_event(data, event_id=event_id)
    if not updated:
        raise HTTPException(status_code=404, detail="Événement non trouvé")
    return updated

@router.delete("/{event_id}")
def delete_event(
    event_id: int,
    db: Session = Depends(get_db),
    current_user: db_models.User = Depends(get_current_user)
):
    """Supprimer un événement et ses dépenses"""
    if not CateringRepository(db, current_user.id).delete_event(event_id):
        raise HTTPException(status_code=404, detail="Événement non trouvé")
    return {"message": "Événement supprimé avec succès"}
