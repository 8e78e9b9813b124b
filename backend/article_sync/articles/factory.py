# backend/article_sync/articles/factory.py

"""
ArticleSyncService の組み立て。

プロセス起動時に 1 度だけ呼び出し、Notion / Supabase のクライアントを生成して
各サービスに注入する。必須の環境変数が欠けている場合は、欠けているものを
全て列挙した EnvVarMissingError を投げる。
"""

from __future__ import annotations

from article_sync.images.config import get_image_settings
from article_sync.images.service import ImageRelay
from article_sync.notion.client import NotionClient
from article_sync.notion.config import get_notion_config
from article_sync.notion.service import NotionPageService
from article_sync.storage.client import create_supabase_client
from article_sync.storage.config import get_supabase_settings
from article_sync.utils.config import require_env_vars

from .repository import ArticleRepository
from .service import ArticleSyncService

REQUIRED_ENV_VARS = ("SUPABASE_URL", "SUPABASE_API_KEY", "NOTION_API_KEY")


def build_article_sync_service() -> ArticleSyncService:
    """
    環境変数から設定を読み込み、ArticleSyncService を生成する。

    :raises EnvVarMissingError: 必須環境変数が 1 つ以上未設定
    :raises RuntimeError: 任意設定の値が不正
    """
    require_env_vars(REQUIRED_ENV_VARS)

    notion_config = get_notion_config()
    supabase_settings = get_supabase_settings()
    image_settings = get_image_settings()

    supabase_client = create_supabase_client(supabase_settings)

    return ArticleSyncService(
        page_service=NotionPageService(NotionClient(notion_config)),
        image_relay=ImageRelay(
            supabase_client,
            settings=supabase_settings,
            image_settings=image_settings,
        ),
        repository=ArticleRepository(supabase_client, settings=supabase_settings),
    )
