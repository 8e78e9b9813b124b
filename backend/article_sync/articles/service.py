# backend/article_sync/articles/service.py

"""
1 ページ分の記事同期を組み立てるサービス層（オーケストレーション）。

処理は直列で、後戻りは無い:

1. Page Fetcher で Markdown + メタデータを取得（失敗は PageFetchError をそのまま送出）
2. カバーがあれば Image Relay で WebP 化して公開 URL を得る
   - 画像処理の失敗はログに残して cover=None で続行する（記事自体は有効とみなす）
3. Article Persister で articles テーブルに insert（失敗は ArticleWriteError を送出）
"""

import logging
from typing import Callable, Optional

from article_sync.images.errors import ImageRelayError
from article_sync.images.service import ImageRelay, generate_storage_key
from article_sync.notion.schemas import CoverReference
from article_sync.notion.service import NotionPageService

from .repository import ArticleRepository
from .schemas import ArticleRecord, ArticleSyncResult

logger = logging.getLogger(__name__)

StorageKeyFactory = Callable[[str], str]


class ArticleSyncService:
    """
    Notion ページを記事として Supabase に保存するサービス。

    依存するサービスはすべてコンストラクタで注入する（テストではフェイクを渡す）。
    """

    def __init__(
        self,
        *,
        page_service: NotionPageService,
        image_relay: ImageRelay,
        repository: ArticleRepository,
        storage_key_factory: Optional[StorageKeyFactory] = None,
    ) -> None:
        self._page_service = page_service
        self._image_relay = image_relay
        self._repository = repository
        self._storage_key_factory = storage_key_factory or generate_storage_key

    def sync_page(self, page_id: str) -> ArticleSyncResult:
        """
        ページを取得・変換し、articles テーブルに 1 行保存する。

        :raises PageFetchError: ページ取得の失敗（MissingTitleError を含む）
        :raises ArticleWriteError: 保存の失敗
        """
        page = self._page_service.fetch_page(page_id)
        metadata = page.metadata

        cover_url: Optional[str] = None
        if metadata.cover is not None:
            cover_url = self._relay_cover(page_id, metadata.cover)

        record = ArticleRecord(
            title=metadata.title,
            content=page.markdown,
            cover=cover_url,
        )
        self._repository.insert(record)

        logger.info(
            "Article saved. page_id=%s title=%s has_cover=%s",
            page_id,
            record.title,
            cover_url is not None,
        )
        return ArticleSyncResult(page_id=page_id, title=record.title, cover=cover_url)

    def _relay_cover(self, page_id: str, cover: CoverReference) -> Optional[str]:
        """
        カバー画像を中継する。失敗した場合は None を返して処理を続ける。
        """
        storage_key = self._storage_key_factory(page_id)
        try:
            return self._image_relay.relay_image(cover.url, storage_key)
        except ImageRelayError as exc:
            logger.warning(
                "Cover image skipped; saving article without cover. "
                "page_id=%s kind=%s error_type=%s error=%s",
                page_id,
                cover.kind.value,
                type(exc).__name__,
                exc,
            )
            return None
