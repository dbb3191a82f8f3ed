from pydantic import BaseModel, Field


class ProjectRules(BaseModel):
    slug: str
    rules_version: str


class SanitizerRules(BaseModel):
    max_content_bytes: int = Field(gt=0)
    max_title_length: int = Field(gt=0)
    max_excerpt_length: int = Field(gt=0)
    max_images_before_warning: int = Field(ge=0)
    slug_pattern: str
    paste_threshold: float = Field(ge=0, le=1)
    allowed_tags: list[str]
    allowed_attrs: list[str]
    drop_with_content: list[str]
    forbidden_protocols: list[str]


class ImageContextRules(BaseModel):
    max_size_kb: int = Field(gt=0)
    max_width: int = Field(gt=0)
    max_height: int = Field(gt=0)
    quality: float = Field(gt=0, le=1)
    max_per_document: int | None = None


class ImageRules(BaseModel):
    allowed_mime_types: list[str]
    min_quality: float = Field(gt=0, le=1)
    contexts: dict[str, ImageContextRules]


class TimeoutTier(BaseModel):
    below_bytes: int | None = None  # None marks the ceiling tier
    timeout_ms: int = Field(gt=0)


class PublishRules(BaseModel):
    max_attempts: int = Field(ge=1)
    base_delay_ms: int = Field(ge=0)
    fast_path_threshold_bytes: int = Field(gt=0)
    timeout_tiers: list[TimeoutTier]


class Rules(BaseModel):
    project: ProjectRules
    sanitizer: SanitizerRules
    images: ImageRules
    publish: PublishRules
