# CATERING/backend/catering/storage.py : stockage des reçus

import logging
import time
from pathlib import Path, PurePosixPath
from typing import Optional
from urllib.parse import quote

import boto3

from catering.config import get_storage_config
from catering.constants import RECEIPT_CONTENT_TYPES, RECEIPT_EXTENSIONS

logger = logging.getLogger(__name__)


class ReceiptValidationError(ValueError):
    """Fichier refusé avant tout envoi vers le stockage"""


def receipt_key(filename: str, timestamp_ms: Optional[int] = None) -> str:
    """Chemin de l'objet : receipts/{timestamp}-{nom du fichier}"""
    if timestamp_ms is None:
        timestamp_ms = int(time.time() * 1000)
    # On ne garde que le nom, jamais un chemin fourni par le client
    name = PurePosixPath(filename.replace("\\", "/")).name or "receipt"
    return f"receipts/{timestamp_ms}-{name}"


def _too_large(max_size: int) -> ReceiptValidationError:
    return ReceiptValidationError(f"File size must be less than {max_size // (1024 * 1024)}MB")


def read_upload(upload, max_size: int) -> bytes:
    """Lit un UploadFile sans dépasser max_size + 1 octets en mémoire"""
    if upload.size is not None and upload.size > max_size:
        raise _too_large(max_size)
    return upload.file.read(max_size + 1)


def validate_receipt(filename: Optional[str], content_type: Optional[str], size: int, max_size: int):
    """Vérifie taille et type du reçu (images ou PDF uniquement)"""
    if not filename:
        raise ReceiptValidationError("No file provided")
    if size <= 0:
        raise ReceiptValidationError("File is empty")
    if size > max_size:
        raise _too_large(max_size)

    content_type = (content_type or "").lower()
    type_ok = any(content_type.startswith(prefix) for prefix in RECEIPT_CONTENT_TYPES)
    extension_ok = filename.lower().endswith(RECEIPT_EXTENSIONS)
    if not (type_ok or (content_type in ("", "application/octet-stream") and extension_ok)):
        raise ReceiptValidationError("Only image or PDF receipts are allowed")


class ReceiptStorage:
    """Interface commune des backends de stockage"""

    def save(self, key: str, data: bytes, content_type: Optional[str] = None) -> str:
        """Enregistre l'objet et retourne son URL publique"""
        raise NotImplementedError


class LocalReceiptStorage(ReceiptStorage):
    """Stockage sur disque, servi par l'application sous /receipts"""

    def __init__(self, directory: Path, public_base_url: str):
        self.directory = Path(directory)
        self.public_base_url = public_base_url.rstrip("/")

    def save(self, key: str, data: bytes, content_type: Optional[str] = None) -> str:
        path = self.directory / key
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
        logger.info(f"📁 Reçu enregistré localement: {path}")
        return f"{self.public_base_url}/{quote(key)}"


class S3ReceiptStorage(ReceiptStorage):
    """Stockage dans un bucket S3"""

    def __init__(self, aws_config: dict, client=None):
        self.bucket = aws_config["bucket_name"]
        self.region = aws_config["region"]
        self.public_read = aws_config.get("public_read", True)
        self.s3_client = client or boto3.client(
            's3',
            aws_access_key_id=aws_config["access_key_id"],
            aws_secret_access_key=aws_config["secret_access_key"],
            region_name=self.region
        )

    def save(self, key: str, data: bytes, content_type: Optional[str] = None) -> str:
        extra = {"ContentType": content_type or "application/octet-stream"}
        if self.public_read:
            extra["ACL"] = "public-read"
        self.s3_client.put_object(Bucket=self.bucket, Key=key, Body=data, **extra)
        logger.info(f"☁️ Reçu uploadé vers s3://{self.bucket}/{key}")
        return f"https://{self.bucket}.s3.{self.region}.amazonaws.com/{quote(key)}"


def store_receipt(storage: ReceiptStorage, filename: Optional[str], content_type: Optional[str],
                  data: bytes, max_size: int) -> dict:
    """Valide puis envoie un reçu au stockage ; retourne {url, filename, size}"""
    validate_receipt(filename, content_type, len(data), max_size)
    url = storage.save(receipt_key(filename), data, content_type)
    return {"url": url, "filename": filename, "size": len(data)}


_storage: Optional[ReceiptStorage] = None


def get_storage() -> ReceiptStorage:
    """Dépendance FastAPI : backend de stockage selon la configuration"""
    global _storage
    if _storage is None:
        config = get_storage_config()
        if config["backend"] == "s3":
            _storage = S3ReceiptStorage(config["aws"])
        else:
            _storage = LocalReceiptStorage(config["directory"], config["public_base_url"])
    return _storage
