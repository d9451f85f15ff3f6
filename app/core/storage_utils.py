# app/core/storage_utils.py
from storage3.utils import StorageException
from supabase import AsyncClient

from app.core.config import get_settings
from app.core.errors import TransientFetchFailure
from app.repositories.base import bounded

settings = get_settings()


def normalize_object_path(path: str) -> str:
    """
    Turn a stored document path into a path relative to the bucket.

    Rows may carry the bucket name as the first segment:
        'documents/patients/p1/report.pdf' -> 'patients/p1/report.pdf'
    """
    path = path.lstrip("/")
    prefix = f"{settings.DOCUMENTS_BUCKET}/"
    if path.startswith(prefix):
        return path[len(prefix) :]
    return path


async def create_signed_document_url(client: AsyncClient, path: str) -> str:
    """
    Issue a time-limited download URL for a private document.

    `client` is the service-role client, so Storage policies do not apply.
    Callers must already have run VisibilityService.ensure_patient_visible
    and loaded the document row scoped to that patient.

    Args:
        path: object path as stored in `documents.path`.

    Returns:
        Signed URL valid for SIGNED_URL_TTL_SECONDS.

    Raises:
        TransientFetchFailure: if Storage fails, times out or returns no URL.
    """
    object_path = normalize_object_path(path)
    bucket = client.storage.from_(settings.DOCUMENTS_BUCKET)
    try:
        data = await bounded(
            bucket.create_signed_url(object_path, settings.SIGNED_URL_TTL_SECONDS),
            f"sign {object_path}",
        )
    except StorageException as exc:
        raise TransientFetchFailure("Failed to download document") from exc

    # storage3 has used both spellings across releases
    url = (data or {}).get("signedURL") or (data or {}).get("signedUrl")
    if not url:
        raise TransientFetchFailure("Failed to download document")
    return url
