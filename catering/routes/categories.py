# CATERING/backend/catering/routes/categories.py

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from typing import List
from catering.models import models as db_models
from catering.schemas import schemas
from catering.database import get_db
from catering.auth import get_current_user
from catering.repository import CateringRepository

router = APIRouter(prefix="/categories", tags=["categories"])

@router.get("/", response_model=List[schemas.CategoryOut])
def list_categories(
    db: Session = Depends(get_db),
    current_user: db_models.User = Depends(get_current_user)
):
    """Liste des catégories de dépenses (partagée entre utilisateurs)"""
    return CateringRepository(db, current_user.id).list_categories()

@router.post("/", response_model=schemas.CategoryOut, status_code=201)
def create_category(
    category: schemas.CategoryCreate,
    db: Session = Depends(get_db),
    current_user: db_models.User = Depends(get_current_user)
):
    try:
        return CateringRepository(db, current_user.id).create_category(category.name)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
