# backend/article_sync/notion/__init__.py

"""
Notion 連携用モジュール群。

- config: Notion API の設定値（API キー, バージョン, タイムアウト）
- client: Notion API への HTTP クライアント
- markdown: ブロックツリー → Markdown 変換
- schemas: ページメタデータ / カバー参照の Pydantic モデル
- service: 1 ページ分の Markdown + メタデータを返す Page Fetcher
"""

from .client import NotionClient  # noqa: F401
from .schemas import CoverKind, CoverReference, FetchedPage, PageMetadata  # noqa: F401
from .service import (  # noqa: F401
    MissingTitleError,
    NotionPageService,
    PageFetchError,
    PageNotFoundError,
    UpstreamTimeoutError,
    UpstreamUnavailableError,
)
