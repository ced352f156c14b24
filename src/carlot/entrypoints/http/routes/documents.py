from fastapi import APIRouter, Depends, Query

from carlot.domain.vendor import Vendor
from carlot.entrypoints.http.dependencies import get_current_vendor, get_resolve_document_use_case
from carlot.entrypoints.http.dtos.documents import ResolvedDocumentDTO
from carlot.use_cases.resolve_document_url import ResolveDocumentUrl


router = APIRouter(prefix="/documents", tags=["Documents"])


@router.get(
    "/resolve",
    response_model=ResolvedDocumentDTO,
    summary="Get an openable URL for a stored document",
    description="""
    Documents are served through short-lived signed URLs. When signing
    fails the stored URL is returned as is; `available` is false only if
    the file itself is gone. URLs of another vendor's files are a 404.
    """,
)
def resolve_document(
    url: str = Query(min_length=1),
    vendor: Vendor = Depends(get_current_vendor),
    use_case: ResolveDocumentUrl = Depends(get_resolve_document_use_case),
) -> ResolvedDocumentDTO:
    resolved = use_case.execute(vendor.id, url)
    return ResolvedDocumentDTO(url=resolved.url, signed=resolved.signed, available=resolved.available)
