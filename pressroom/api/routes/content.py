"""
Content API routes.

Validation endpoints report problems in the body with 200; create and
update map pipeline error codes to HTTP statuses.
"""

from typing import Any

from fastapi import APIRouter, Depends

from pressroom.api.deps import (
    get_clock,
    get_document_repo,
    get_identity,
    get_parser,
    get_rules_provider,
    get_sleeper,
)
from pressroom.api.errors import pipeline_http_error
from pressroom.api.schemas import (
    DocumentRequest,
    PublishResponse,
    ValidateContentRequest,
    ValidateMetadataRequest,
    ValidationResponse,
)
from pressroom.components.publish import PublishInput, PublishMode, run_publish
from pressroom.components.sanitizer import (
    SanitizeOptions,
    ValidateContentInput,
    ValidateMetadataInput,
    run_validate,
    run_validate_metadata,
)
from pressroom.core.entities import ContentDocument

router = APIRouter()


@router.post("/validate", response_model=ValidationResponse)
def validate_content(
    req: ValidateContentRequest,
    parser: Any = Depends(get_parser),
    rules: Any = Depends(get_rules_provider),
) -> ValidationResponse:
    """Sanitize and validate a document body without saving it."""
    inp = ValidateContentInput(
        raw_body=req.raw_body,
        options=SanitizeOptions(
            sanitize=req.sanitize,
            validate_size=req.validate_size,
            strip_empty_tags=req.strip_empty_tags,
        ),
    )
    result = run_validate(inp, parser=parser, rules=rules)
    return ValidationResponse.from_result(result)


@router.post("/validate-metadata", response_model=ValidationResponse)
def validate_metadata(
    req: ValidateMetadataRequest,
    parser: Any = Depends(get_parser),
    rules: Any = Depends(get_rules_provider),
) -> ValidationResponse:
    """Validate title, excerpt and slug."""
    inp = ValidateMetadataInput(title=req.title, excerpt=req.excerpt, slug=req.slug)
    result = run_validate_metadata(inp, parser=parser, rules=rules)
    return ValidationResponse.from_result(result)


def _publish(
    req: DocumentRequest,
    mode: PublishMode,
    document_id: str | None,
    **ports: Any,
) -> PublishResponse:
    document = ContentDocument(**req.model_dump(exclude={"tags"}))
    inp = PublishInput(
        document=document,
        tags=tuple(req.tags) if req.tags is not None else None,
        mode=mode,
        document_id=document_id,
    )
    result = run_publish(inp, **ports)

    if not result.success:
        raise pipeline_http_error(result.error_code, result.error)

    return PublishResponse(
        success=True,
        id=result.id,
        warnings=result.warnings,
        attempts=result.attempts,
    )


@router.post("", response_model=PublishResponse, status_code=201)
def create_document(
    req: DocumentRequest,
    repo: Any = Depends(get_document_repo),
    identity: Any = Depends(get_identity),
    parser: Any = Depends(get_parser),
    clock: Any = Depends(get_clock),
    sleeper: Any = Depends(get_sleeper),
    rules: Any = Depends(get_rules_provider),
) -> PublishResponse:
    """Create a document."""
    return _publish(
        req,
        "create",
        None,
        repo=repo,
        identity=identity,
        parser=parser,
        clock=clock,
        sleeper=sleeper,
        rules=rules,
    )


@router.put("/{document_id}", response_model=PublishResponse)
def update_document(
    document_id: str,
    req: DocumentRequest,
    repo: Any = Depends(get_document_repo),
    identity: Any = Depends(get_identity),
    parser: Any = Depends(get_parser),
    clock: Any = Depends(get_clock),
    sleeper: Any = Depends(get_sleeper),
    rules: Any = Depends(get_rules_provider),
) -> PublishResponse:
    """Update a document; tags are replaced only when supplied."""
    return _publish(
        req,
        "update",
        document_id,
        repo=repo,
        identity=identity,
        parser=parser,
        clock=clock,
        sleeper=sleeper,
        rules=rules,
    )
