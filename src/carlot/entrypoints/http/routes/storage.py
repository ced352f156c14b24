from fastapi import APIRouter, Depends, Query
from fastapi.responses import FileResponse

from carlot.adapters.local_object_storage import LocalObjectStorage
from carlot.domain.errors import ForbiddenError, NotFoundError
from carlot.domain.filenames import PUBLIC_BUCKETS, STORAGE_BUCKETS
from carlot.entrypoints.http.dependencies import get_storage
from carlot.ports.object_storage import ObjectStorage


router = APIRouter(prefix="/storage", tags=["Storage"])


@router.get(
    "/{bucket}/{key:path}",
    summary="Download a stored object",
    description="""
    Car images and profile photos are public. Car and client documents
    need the `expires` and `signature` parameters of a signed URL.
    """,
    response_class=FileResponse,
    responses={403: {"description": "Missing, invalid or expired signature"}, 404: {}},
)
def download(
    bucket: str,
    key: str,
    expires: int | None = Query(default=None),
    signature: str | None = Query(default=None),
    storage: ObjectStorage = Depends(get_storage),
) -> FileResponse:
    if bucket not in STORAGE_BUCKETS or not isinstance(storage, LocalObjectStorage):
        raise NotFoundError(resource="Object", identifier=f"{bucket}/{key}")
    if bucket not in PUBLIC_BUCKETS:
        if expires is None or signature is None:
            raise ForbiddenError("A signed URL is required for this file")
        if not storage.verify_signature(bucket, key, expires, signature):
            raise ForbiddenError("Signed URL is invalid or has expired")
    if not storage.exists(bucket, key):
        raise NotFoundError(resource="Object", identifier=f"{bucket}/{key}")
    return FileResponse(storage.path_for(bucket, key))
