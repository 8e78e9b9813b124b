# backend/article_sync/articles/__init__.py

"""
記事同期モジュール。

- schemas: ArticleRecord とレスポンスモデル
- repository: articles テーブルへの insert（Article Persister）
- service: 取得 → 画像中継 → 保存の直列オーケストレーション
- factory: 起動時の依存組み立て
- router: GET /api/{page_id}
"""

from .repository import ArticleRepository, ArticleWriteError, ArticleWriteTimeoutError  # noqa: F401
from .schemas import ArticleRecord, ArticleSyncResponse, ArticleSyncResult  # noqa: F401
from .service import ArticleSyncService  # noqa: F401
