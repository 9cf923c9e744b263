# CATERING/backend/catering/routes/expenses.py

import logging
from fastapi import APIRouter, Depends, HTTPException, Query, UploadFile, File
from sqlalchemy.orm import Session
from typing import List, Optional
from catering.models import models as db_models
from catering.schemas import schemas
from catering.database import get_db
from catering.auth import get_current_user
from catering.config import MAX_RECEIPT_SIZE
from catering.repository import CateringRepository
from catering.storage import ReceiptStorage, ReceiptValidationError, get_storage, read_upload

router = APIRouter(prefix="/expenses", tags=["expenses"])
logger = logging.getLogger(__name__)

NULLABLE_FIELDS = {"receipt_url", "receipt_file_name"}

@router.post("/", response_model=schemas.ExpenseOut, status_code=201)
def create_expense(
    expense: schemas.ExpenseCreate,
    db: Session = Depends(get_db),
    current_user: db_models.User = Depends(get_current_user)
):
    """Créer une dépense rattachée à un événement et une catégorie"""
    try:
        return CateringRepository(db, current_user.id).upsert_expense(expense.model_dump())
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

@router.get("/", response_model=List[schemas.ExpenseOut])
def list_expenses(
    event_id: Optional[int] = None,
    limit: Optional[int] = Query(None, ge=1, le=500, description="Nombre maximum de dépenses"),
    db: Session = Depends(get_db),
    current_user: db_models.User = Depends(get_current_user)
):
    """Dépenses de l'utilisateur (filtrées par événement si spécifié)"""
    repo = CateringRepository(db, current_user.id)
    if event_id is not None and not repo.get_event(event_id):
        raise HTTPException(status_code=404, detail="Événement non trouvé")
    return repo.list_expenses(event_id=event_id, limit=limit)

@router.get("/{expense_id}", response_model=schemas.ExpenseOut)
def get_expense(
    expense_id: int,
    db: Session = Depends(get_db),
    current_user: db_models.User = Depends(get_current_user)
):
    expense = CateringRepository(db, current_user.id).get_expense(expense_id)
    if not expense:
        raise HTTPException(status_code=404, detail="Dépense non trouvée")
    return expense

@router.put("/{expense_id}", response_model=schemas.ExpenseOut)
def update_expense(
    expense_id: int,
    expense: schemas.ExpenseUpdate,
    db: Session = Depends(get_db),
    current_user: db_models.User = Depends(get_current_user)
):
    """Modifier une dépense (seuls les champs fournis changent)"""
    data = {
        k: v for k, v in expense.model_dump(exclude_unset=True).items()
        if v is not None or k in NULLABLE_FIELDS
    }
    try:
        updated = CateringRepository(db, current_user.id).upsert_expense(data, expense_id=expense_id)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    if not updated:
        raise HTTPException(status_code=404, detail="Dépense non trouvée")
    return updated

@router.delete("/{expense_id}")
def delete_expense(
    expense_id: int,
    db: Session = Depends(get_db),
    current_user: db_models.User = Depends(get_current_user)
):
    if not CateringRepository(db, current_user.id).delete_expense(expense_id):
        raise HTTPException(status_code=404, detail="Dépense non trouvée")
    return {"message": "Dépense supprimée avec succès"}

@router.post("/{expense_id}/receipt", response_model=schemas.ExpenseOut)
def upload_expense_receipt(
    expense_id: int,
    file: UploadFile = File(...),
    db: Session = Depends(get_db),
    current_user: db_models.User = Depends(get_current_user),
    storage: ReceiptStorage = Depends(get_storage)
):
    """Envoyer un reçu et l'attacher à une dépense existante"""
    repo = CateringRepository(db, current_user.id, storage)
    if not repo.get_expense(expense_id):
        raise HTTPException(status_code=404, detail="Dépense non trouvée")

    try:
        data = read_upload(file, MAX_RECEIPT_SIZE)
        uploaded = repo.upload_receipt(file.filename, file.content_type, data, MAX_RECEIPT_SIZE)
    except ReceiptValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception:
        logger.exception(f"❌ Échec de l'envoi du reçu pour la dépense {expense_id}")
        raise HTTPException(status_code=500, detail="Failed to upload receipt. Please try again.")

    return repo.attach_receipt(expense_id, uploaded["url"], uploaded["filename"])
