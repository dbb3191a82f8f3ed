from pydantic import BaseModel, Field

from pressroom.components.sanitizer import ProvenanceGuess, ValidationResult
from pressroom.core.entities import DocumentStatus


# --- Validation ---
class ValidateContentRequest(BaseModel):
    raw_body: str
    sanitize: bool = True
    validate_size: bool = True
    strip_empty_tags: bool = True


class ValidateMetadataRequest(BaseModel):
    title: str
    excerpt: str | None = None
    slug: str | None = None


class ProvenanceModel(BaseModel):
    is_pasted: bool
    confidence: float
    sources: list[str] = []

    @classmethod
    def from_guess(cls, guess: ProvenanceGuess) -> "ProvenanceModel":
        return cls(
            is_pasted=guess.is_pasted,
            confidence=guess.confidence,
            sources=[s.value for s in guess.ordered_sources()],
        )


class ValidationResponse(BaseModel):
    is_valid: bool
    errors: list[str] = []
    warnings: list[str] = []
    processed_content: str | None = None
    provenance: ProvenanceModel | None = None

    @classmethod
    def from_result(cls, result: ValidationResult) -> "ValidationResponse":
        return cls(
            is_valid=result.is_valid,
            errors=result.errors,
            warnings=result.warnings,
            processed_content=result.processed_content,
            provenance=(
                ProvenanceModel.from_guess(result.provenance) if result.provenance else None
            ),
        )


# --- Documents ---
class DocumentRequest(BaseModel):
    title: str
    raw_body: str
    excerpt: str | None = None
    slug: str | None = None
    status: DocumentStatus = "draft"
    category_id: str | None = None
    featured_image: str | None = None
    existing_image_count: int = Field(default=0, ge=0)
    tags: list[str] | None = None


class PublishResponse(BaseModel):
    success: bool
    id: str | None = None
    warnings: list[str] = []
    attempts: int = 0


# --- Images ---
class ImageUploadResponse(BaseModel):
    url: str
    was_compressed: bool
    original_size_label: str
    new_size_label: str


class ImageDeleteResponse(BaseModel):
    deleted: bool
