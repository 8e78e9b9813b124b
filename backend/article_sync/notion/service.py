# backend/article_sync/notion/service.py

"""
NotionClient と内部スキーマをつなぐサービス層（Page Fetcher）。

- ページのメタデータ取得 → PageMetadata への変換（タイトル / カバー）
- ブロックツリーの再帰取得 → Markdown への変換
- Notion クライアントの例外を PageFetchError 系に分類し直す
"""

import logging
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from .client import (
    NotionClient,
    NotionClientError,
    NotionNotFoundError,
    NotionTimeoutError,
)
from .markdown import blocks_to_markdown
from .schemas import CoverKind, CoverReference, FetchedPage, PageMetadata

logger = logging.getLogger(__name__)

TITLE_PROPERTY = "Name"

# 別ページとして扱うため子孫を辿らないブロック種別
_NON_DESCENDING_TYPES = {"child_page", "child_database"}


class PageFetchError(RuntimeError):
    """ページ取得処理全般の基底例外。"""

    def __init__(self, page_id: str, message: str) -> None:
        super().__init__(message)
        self.page_id = page_id


class PageNotFoundError(PageFetchError):
    """ページ ID が不正、またはアクセスできない。"""


class MissingTitleError(PageFetchError):
    """Name（title 型）プロパティが無い、または空。"""


class UpstreamUnavailableError(PageFetchError):
    """通信エラー・認証エラー・想定外のレスポンス形式など。"""


class UpstreamTimeoutError(PageFetchError):
    """Notion API 呼び出しがタイムアウトした。"""


def extract_title(properties: Dict[str, Any]) -> Optional[str]:
    """
    Name プロパティ（title 型）からタイトル文字列を取り出す。

    rich text が複数セグメントに分かれている場合は連結する。
    見つからない / 空の場合は None。
    """
    prop = properties.get(TITLE_PROPERTY)
    if not isinstance(prop, dict):
        return None

    if prop.get("type", "title") != "title":
        return None

    segments = prop.get("title")
    if not isinstance(segments, list) or not segments:
        return None

    text = "".join(
        segment.get("plain_text", "")
        for segment in segments
        if isinstance(segment, dict)
    ).strip()
    return text or None


def parse_cover(raw: Any) -> Optional[CoverReference]:
    """
    Notion の cover オブジェクトを CoverReference に変換する。

    - {"type": "external", "external": {"url": ...}} → EXTERNAL
    - {"type": "file", "file": {"url": ..., "expiry_time": ...}} → HOSTED
    - それ以外（未知の type / URL 無し）はカバー無しとして扱う
    """
    if not raw:
        return None
    if not isinstance(raw, dict):
        logger.warning("Ignoring cover with unexpected shape: %r", type(raw).__name__)
        return None

    cover_type = raw.get("type")
    if cover_type == "external":
        kind = CoverKind.EXTERNAL
    elif cover_type == "file":
        kind = CoverKind.HOSTED
    else:
        logger.warning("Ignoring unsupported cover type: %s", cover_type)
        return None

    url = (raw.get(cover_type) or {}).get("url")
    if not isinstance(url, str) or not url:
        logger.warning("Ignoring %s cover without URL.", cover_type)
        return None

    return CoverReference(kind=kind, url=url)


class NotionPageService:
    """
    NotionClient を利用して、1 ページ分の Markdown とメタデータを返すサービス。
    """

    def __init__(self, client: Optional[NotionClient] = None) -> None:
        self.client = client or NotionClient()

    def fetch_page(self, page_id: str) -> FetchedPage:
        """
        ページのメタデータとブロックツリーを取得し、FetchedPage を返す。

        タイトルが無いページはブロックを取得する前に MissingTitleError とする。

        :raises PageNotFoundError: ページ ID が不正 / 参照不可
        :raises MissingTitleError: Name プロパティが無い / 空
        :raises UpstreamTimeoutError: Notion API のタイムアウト
        :raises UpstreamUnavailableError: その他の通信・認証・形式エラー
        """
        try:
            page = self.client.retrieve_page(page_id)
            metadata = self._parse_metadata(page_id, page)
            blocks = self._fetch_block_tree(page_id)
        except NotionNotFoundError as exc:
            raise PageNotFoundError(page_id, f"Notion page not found: {page_id}") from exc
        except NotionTimeoutError as exc:
            raise UpstreamTimeoutError(page_id, f"Notion API timed out for page {page_id}") from exc
        except NotionClientError as exc:
            raise UpstreamUnavailableError(page_id, f"Notion API unavailable: {exc}") from exc

        markdown = blocks_to_markdown(blocks)
        logger.info("Fetched Notion page. page_id=%s title=%s", page_id, metadata.title)

        return FetchedPage(page_id=page_id, markdown=markdown, metadata=metadata)

    def _parse_metadata(self, page_id: str, page: Dict[str, Any]) -> PageMetadata:
        properties = page.get("properties")
        if not isinstance(properties, dict):
            properties = {}

        title = extract_title(properties)
        if title is None:
            raise MissingTitleError(
                page_id, f'Property "{TITLE_PROPERTY}" not found on page {page_id}'
            )

        try:
            return PageMetadata(title=title, cover=parse_cover(page.get("cover")))
        except ValidationError as exc:
            raise UpstreamUnavailableError(
                page_id, f"Unexpected Notion page format: {exc}"
            ) from exc

    def _fetch_block_tree(self, block_id: str) -> List[Dict[str, Any]]:
        """
        子ブロックを再帰的に取得し、各ブロックの "children" に格納して返す。
        """
        blocks = self.client.list_block_children(block_id)
        for block in blocks:
            if not isinstance(block, dict):
                raise NotionClientError("Unexpected Notion block format.")
            if block.get("has_children") and block.get("type") not in _NON_DESCENDING_TYPES:
                child_id = block.get("id")
                if not child_id:
                    raise NotionClientError("Notion block with children has no id.")
                block["children"] = self._fetch_block_tree(child_id)
        return blocks
