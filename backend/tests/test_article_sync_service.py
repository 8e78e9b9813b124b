# backend/tests/test_article_sync_service.py

import logging
from typing import List, Optional, Tuple

import pytest

from article_sync.articles.repository import ArticleWriteError
from article_sync.articles.schemas import ArticleRecord
from article_sync.articles.service import ArticleSyncService
from article_sync.images.errors import (
    ImageDownloadError,
    ImageRelayError,
    ImageRelayTimeoutError,
    ImageTranscodeError,
    ImageUploadError,
)
from article_sync.notion.schemas import CoverKind, CoverReference, FetchedPage, PageMetadata
from article_sync.notion.service import MissingTitleError, PageNotFoundError

PUBLIC_BASE = "https://dummy.supabase.co/storage/v1/object/public/images/articles/"


class FakePageService:
    def __init__(self, page: Optional[FetchedPage] = None, error: Optional[Exception] = None) -> None:
        self.page = page
        self.error = error

    def fetch_page(self, page_id: str) -> FetchedPage:
        if self.error is not None:
            raise self.error
        return self.page


class FakeImageRelay:
    def __init__(self, error: Optional[ImageRelayError] = None) -> None:
        self.error = error
        self.calls: List[Tuple[str, str]] = []

    def relay_image(self, source_url: str, storage_key: str) -> str:
        self.calls.append((source_url, storage_key))
        if self.error is not None:
            raise self.error
        return f"{PUBLIC_BASE}{storage_key}.webp"


class FakeRepository:
    def __init__(self, error: Optional[Exception] = None) -> None:
        self.error = error
        self.records: List[ArticleRecord] = []

    def insert(self, record: ArticleRecord) -> None:
        if self.error is not None:
            raise self.error
        self.records.append(record)


def _page(cover: Optional[CoverReference] = None, markdown: str = "# Hi\n\nbody") -> FetchedPage:
    return FetchedPage(
        page_id="page-1",
        markdown=markdown,
        metadata=PageMetadata(title="Title", cover=cover),
    )


def _service(page_service, relay, repository, keys=None) -> ArticleSyncService:
    return ArticleSyncService(
        page_service=page_service,
        image_relay=relay,
        repository=repository,
        storage_key_factory=keys,
    )


def test_sync_without_cover_skips_relay() -> None:
    relay = FakeImageRelay()
    repository = FakeRepository()
    service = _service(FakePageService(_page()), relay, repository)

    result = service.sync_page("page-1")

    assert relay.calls == []
    assert repository.records == [ArticleRecord(title="Title", content="# Hi\n\nbody", cover=None)]
    assert result.cover is None


@pytest.mark.parametrize("kind", [CoverKind.EXTERNAL, CoverKind.HOSTED])
def test_sync_with_cover_stores_public_url(kind) -> None:
    cover = CoverReference(kind=kind, url="https://src/cover.png")
    relay = FakeImageRelay()
    repository = FakeRepository()
    service = _service(
        FakePageService(_page(cover)),
        relay,
        repository,
        keys=lambda page_id: f"{page_id}abc123",
    )

    result = service.sync_page("page-1")

    assert relay.calls == [("https://src/cover.png", "page-1abc123")]
    assert repository.records[0].cover == f"{PUBLIC_BASE}page-1abc123.webp"
    assert result.cover == repository.records[0].cover


@pytest.mark.parametrize(
    "error",
    [
        ImageDownloadError("404"),
        ImageTranscodeError("bad bytes"),
        ImageUploadError("quota"),
        ImageRelayTimeoutError("slow"),
    ],
)
def test_sync_degrades_when_image_pipeline_fails(error, caplog) -> None:
    cover = CoverReference(kind=CoverKind.EXTERNAL, url="https://src/cover.png")
    repository = FakeRepository()
    service = _service(FakePageService(_page(cover)), FakeImageRelay(error=error), repository)

    with caplog.at_level(logging.WARNING):
        result = service.sync_page("page-1")

    assert result.cover is None
    assert repository.records[0].cover is None
    assert any("Cover image skipped" in r.getMessage() for r in caplog.records)


def test_sync_stores_markdown_verbatim() -> None:
    markdown = "  leading\n\n```\ncode  \n```\n"
    repository = FakeRepository()
    service = _service(FakePageService(_page(markdown=markdown)), FakeImageRelay(), repository)

    service.sync_page("page-1")

    assert repository.records[0].content == markdown


@pytest.mark.parametrize(
    "error",
    [MissingTitleError("page-1", "no title"), PageNotFoundError("page-1", "gone")],
)
def test_sync_propagates_fetch_errors_without_writing(error) -> None:
    repository = FakeRepository()
    relay = FakeImageRelay()
    service = _service(FakePageService(error=error), relay, repository)

    with pytest.raises(type(error)):
        service.sync_page("page-1")

    assert relay.calls == []
    assert repository.records == []


def test_sync_propagates_write_errors_after_relay() -> None:
    cover = CoverReference(kind=CoverKind.HOSTED, url="https://s3/cover.png")
    relay = FakeImageRelay()
    service = _service(
        FakePageService(_page(cover)),
        relay,
        FakeRepository(error=ArticleWriteError("db down")),
    )

    with pytest.raises(ArticleWriteError):
        service.sync_page("page-1")

    # 画像はアップロード済み（孤立オブジェクトとして残る）
    assert len(relay.calls) == 1


def test_sync_twice_uses_distinct_storage_keys() -> None:
    cover = CoverReference(kind=CoverKind.EXTERNAL, url="https://src/cover.png")
    relay = FakeImageRelay()
    repository = FakeRepository()
    service = _service(FakePageService(_page(cover)), relay, repository)

    service.sync_page("page-1")
    service.sync_page("page-1")

    assert len(repository.records) == 2
    first_key, second_key = relay.calls[0][1], relay.calls[1][1]
    assert first_key != second_key
    assert first_key.startswith("page-1") and second_key.startswith("page-1")


def test_sync_with_malformed_cover_url_saves_without_cover() -> None:
    from test_image_relay import FakeSupabase as FakeStorageSupabase, _make_relay

    cover = CoverReference(kind=CoverKind.EXTERNAL, url="http://cdn.example.com:notaport/cover.png")
    repository = FakeRepository()
    service = _service(
        FakePageService(_page(cover)),
        _make_relay(FakeStorageSupabase()),
        repository,
    )

    result = service.sync_page("page-1")

    assert result.cover is None
    assert repository.records[0].cover is None
