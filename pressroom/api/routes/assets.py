"""
Assets API routes.

Image uploads pass through the image gate before they are stored.
"""

from typing import Any

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile

from pressroom.api.deps import get_identity, get_storage, get_uploader
from pressroom.api.errors import pipeline_http_error
from pressroom.api.schemas import ImageDeleteResponse, ImageUploadResponse
from pressroom.components.imagegate import DeleteImageInput, run_delete_image

router = APIRouter()


@router.post("/images", response_model=ImageUploadResponse, status_code=201)
def upload_image(
    file: UploadFile = File(...),
    context: str = Form("content"),
    current_count: int = Form(0),
    document_id: str | None = Form(None),
    identity: Any = Depends(get_identity),
    uploader: Any = Depends(get_uploader),
) -> ImageUploadResponse:
    """Validate, compress and store an image for a context."""
    data = file.file.read()
    mime_type = file.content_type or "application/octet-stream"

    result = uploader.upload(
        data,
        mime_type,
        context,
        current_count=current_count,
        document_id=document_id,
    )

    if not result.success:
        err = result.errors[0]
        raise pipeline_http_error(err.code, err.message)

    return ImageUploadResponse(
        url=result.url,
        was_compressed=result.was_compressed,
        original_size_label=result.original_size_label,
        new_size_label=result.new_size_label,
    )


@router.delete("/images", response_model=ImageDeleteResponse)
def delete_image(
    url: str = Query(...),
    identity: Any = Depends(get_identity),
    storage: Any = Depends(get_storage),
) -> ImageDeleteResponse:
    """Delete a stored image by its public URL."""
    result = run_delete_image(DeleteImageInput(url=url), storage=storage)

    if not result.success:
        err = result.errors[0]
        raise pipeline_http_error(err.code, err.message)

    return ImageDeleteResponse(deleted=result.deleted)
