# backend/tests/test_notion_service.py

from typing import Any, Dict, List, Optional

import pytest

from article_sync.notion.client import (
    NotionAuthError,
    NotionClientError,
    NotionNotFoundError,
    NotionTimeoutError,
)
from article_sync.notion.schemas import CoverKind
from article_sync.notion.service import (
    MissingTitleError,
    NotionPageService,
    PageNotFoundError,
    UpstreamTimeoutError,
    UpstreamUnavailableError,
    extract_title,
    parse_cover,
)


class FakeNotionClient:
    """
    NotionPageService のユニットテスト用フェイククライアント。

    - retrieve_page は固定のページオブジェクトを返す（または例外を投げる）
    - list_block_children はブロック ID ごとの子ブロックを返し、呼び出しを記録する
    """

    def __init__(
        self,
        page: Optional[Dict[str, Any]] = None,
        children: Optional[Dict[str, List[Dict[str, Any]]]] = None,
        error: Optional[Exception] = None,
    ) -> None:
        self.page = page or {}
        self.children = children or {}
        self.error = error
        self.block_calls: List[str] = []

    def retrieve_page(self, page_id: str) -> Dict[str, Any]:
        if self.error is not None:
            raise self.error
        return self.page

    def list_block_children(self, block_id: str) -> List[Dict[str, Any]]:
        self.block_calls.append(block_id)
        return [dict(block) for block in self.children.get(block_id, [])]


def _title_prop(*segments: str) -> Dict[str, Any]:
    return {
        "Name": {
            "id": "title",
            "type": "title",
            "title": [{"type": "text", "plain_text": s} for s in segments],
        }
    }


def _paragraph(text: str, block_id: str = "p", has_children: bool = False) -> Dict[str, Any]:
    return {
        "id": block_id,
        "type": "paragraph",
        "has_children": has_children,
        "paragraph": {"rich_text": [{"type": "text", "plain_text": text}]},
    }


def test_extract_title_joins_segments() -> None:
    assert extract_title(_title_prop("Hello ", "World")) == "Hello World"


@pytest.mark.parametrize(
    "properties",
    [
        {},
        {"Title": _title_prop("x")["Name"]},
        {"Name": {"type": "rich_text", "rich_text": []}},
        _title_prop(),
        _title_prop("   "),
    ],
)
def test_extract_title_missing_or_empty(properties) -> None:
    assert extract_title(properties) is None


def test_parse_cover_variants() -> None:
    external = parse_cover({"type": "external", "external": {"url": "https://e/x.png"}})
    hosted = parse_cover(
        {"type": "file", "file": {"url": "https://s3/x.png", "expiry_time": "2030-01-01"}}
    )

    assert external.kind == CoverKind.EXTERNAL
    assert external.url == "https://e/x.png"
    assert hosted.kind == CoverKind.HOSTED
    assert hosted.url == "https://s3/x.png"


def test_parse_cover_absent_or_unknown() -> None:
    assert parse_cover(None) is None
    assert parse_cover({"type": "file_upload", "file_upload": {"id": "u1"}}) is None
    assert parse_cover({"type": "external", "external": {}}) is None


def test_fetch_page_returns_markdown_and_metadata() -> None:
    client = FakeNotionClient(
        page={
            "id": "page-1",
            "properties": _title_prop("My Article"),
            "cover": {"type": "external", "external": {"url": "https://e/cover.jpg"}},
        },
        children={
            "page-1": [_paragraph("first", "b1", has_children=True), _paragraph("second", "b2")],
            "b1": [_paragraph("nested", "b3")],
        },
    )
    service = NotionPageService(client=client)

    page = service.fetch_page("page-1")

    assert page.page_id == "page-1"
    assert page.metadata.title == "My Article"
    assert page.metadata.cover.kind == CoverKind.EXTERNAL
    assert page.metadata.cover.url == "https://e/cover.jpg"
    assert page.markdown == "first\n\n    nested\n\nsecond"
    assert client.block_calls == ["page-1", "b1"]


def test_fetch_page_does_not_descend_into_child_pages() -> None:
    client = FakeNotionClient(
        page={"properties": _title_prop("Parent")},
        children={
            "page-1": [
                {
                    "id": "child",
                    "type": "child_page",
                    "has_children": True,
                    "child_page": {"title": "Sub page"},
                }
            ]
        },
    )
    service = NotionPageService(client=client)

    page = service.fetch_page("page-1")

    assert client.block_calls == ["page-1"]
    assert page.markdown == "**Sub page**"
    assert page.metadata.cover is None


def test_fetch_page_missing_title_skips_block_fetch() -> None:
    client = FakeNotionClient(page={"properties": {}})
    service = NotionPageService(client=client)

    with pytest.raises(MissingTitleError):
        service.fetch_page("page-1")

    assert client.block_calls == []


@pytest.mark.parametrize(
    "error, expected",
    [
        (NotionNotFoundError("404"), PageNotFoundError),
        (NotionAuthError("401"), UpstreamUnavailableError),
        (NotionClientError("boom"), UpstreamUnavailableError),
        (NotionTimeoutError("slow"), UpstreamTimeoutError),
    ],
)
def test_fetch_page_classifies_client_errors(error, expected) -> None:
    service = NotionPageService(client=FakeNotionClient(error=error))

    with pytest.raises(expected) as excinfo:
        service.fetch_page("page-1")

    assert excinfo.value.page_id == "page-1"
    assert excinfo.value.__cause__ is error
