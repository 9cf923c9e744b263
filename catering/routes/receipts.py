# CATERING/backend/catering/routes/receipts.py

import logging
from typing import Optional
from fastapi import APIRouter, Depends, UploadFile, File
from fastapi.responses import JSONResponse
from catering.models import models as db_models
from catering.schemas import schemas
from catering.auth import get_current_user
from catering.config import MAX_RECEIPT_SIZE
from catering.storage import ReceiptStorage, ReceiptValidationError, get_storage, read_upload, store_receipt

router = APIRouter(prefix="/api", tags=["receipts"])
logger = logging.getLogger(__name__)

@router.post("/upload-receipt", response_model=schemas.ReceiptUploadOut)
def upload_receipt(
    file: Optional[UploadFile] = File(None),
    current_user: db_models.User = Depends(get_current_user),
    storage: ReceiptStorage = Depends(get_storage)
):
    """
    Envoi d'un reçu (formulaire multipart, champ "file").
    Réponse : {url, filename, size} ou {error} avec un statut 400/500.
    """
    if file is None:
        return JSONResponse(status_code=400, content={"error": "No file provided"})

    # Aucune ligne n'est écrite ici : le reçu n'est rattaché qu'à la création de la dépense
    try:
        data = read_upload(file, MAX_RECEIPT_SIZE)
        uploaded = store_receipt(storage, file.filename, file.content_type, data, MAX_RECEIPT_SIZE)
    except ReceiptValidationError as e:
        return JSONResponse(status_code=400, content={"error": str(e)})
    except Exception:
        logger.exception("❌ Erreur lors de l'envoi du reçu")
        return JSONResponse(status_code=500, content={"error": "Failed to upload receipt. Please try again."})

    logger.info(f"🧾 Reçu envoyé par l'utilisateur {current_user.id}: {uploaded['filename']} ({uploaded['size']} octets)")
    return uploaded
