import os
from functools import lru_cache
from pathlib import Path

from fastapi import Depends, Header, HTTPException, status

from pressroom.adapters.clock import SystemClock, TimeSleeper
from pressroom.adapters.identity import StaticIdentity, identity_from_headers
from pressroom.adapters.local_storage import LocalFileStorage
from pressroom.adapters.memory_repo import InMemoryDocumentRepo
from pressroom.adapters.pillow_codec import PillowImageCodec
from pressroom.adapters.soup_parser import SoupMarkupParser
from pressroom.components.imagegate import ImageUploader, create_uploader
from pressroom.rules.loader import load_rules
from pressroom.rules.models import Rules
from pressroom.rules.provider import RulesProvider


# --- Settings ---
class Settings:
    def __init__(self) -> None:
        self.base_dir = Path(os.getcwd())
        self.data_dir = Path(os.environ.get("PRESSROOM_DATA_DIR", "./data"))
        self.media_dir = self.data_dir / "media"
        self.rules_path = Path(
            os.environ.get("PRESSROOM_RULES_PATH", str(self.base_dir / "rules.yaml"))
        )
        self.public_base_url = os.environ.get("PRESSROOM_PUBLIC_BASE_URL", "/media")


@lru_cache
def get_settings() -> Settings:
    return Settings()


# --- Rules ---
@lru_cache
def get_rules(settings: Settings = Depends(get_settings)) -> Rules:
    return load_rules(settings.rules_path)


def get_rules_provider(rules: Rules = Depends(get_rules)) -> RulesProvider:
    return RulesProvider(rules)


# --- Adapters ---
@lru_cache
def get_parser() -> SoupMarkupParser:
    return SoupMarkupParser()


@lru_cache
def get_codec() -> PillowImageCodec:
    return PillowImageCodec()


@lru_cache
def get_clock() -> SystemClock:
    return SystemClock()


@lru_cache
def get_sleeper() -> TimeSleeper:
    return TimeSleeper()


def get_storage(settings: Settings = Depends(get_settings)) -> LocalFileStorage:
    return LocalFileStorage(settings.media_dir, settings.public_base_url)


# Document repo singleton; the relational store is an external collaborator
_document_repo_instance: InMemoryDocumentRepo | None = None


def get_document_repo() -> InMemoryDocumentRepo:
    """Get document repo singleton."""
    global _document_repo_instance
    if _document_repo_instance is None:
        _document_repo_instance = InMemoryDocumentRepo()
    return _document_repo_instance


# --- Identity ---
def get_identity(
    x_user_id: str | None = Header(default=None),
    x_user_role: str | None = Header(default=None),
) -> StaticIdentity:
    """Acting user as asserted by the upstream auth proxy."""
    try:
        return identity_from_headers(x_user_id, x_user_role)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={"code": "unauthenticated", "message": "Valid X-User-Id header required"},
        )


# --- Component Services ---
def get_uploader(
    codec: PillowImageCodec = Depends(get_codec),
    storage: LocalFileStorage = Depends(get_storage),
    clock: SystemClock = Depends(get_clock),
    rules: RulesProvider = Depends(get_rules_provider),
) -> ImageUploader:
    """Get image uploader (gate + storage)."""
    return create_uploader(codec, storage, clock, rules)
