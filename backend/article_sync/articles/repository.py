# backend/article_sync/articles/repository.py

"""
articles テーブルへの書き込みを担当するリポジトリ（Article Persister）。
"""

import logging
from typing import Optional

import httpx
from supabase import Client

from article_sync.storage.config import SupabaseSettings, get_supabase_settings

from .schemas import ArticleRecord

logger = logging.getLogger(__name__)


class ArticleWriteError(RuntimeError):
    """articles テーブルへの書き込みに失敗した（制約違反 / 接続 / 認証などを区別しない）。"""


class ArticleWriteTimeoutError(ArticleWriteError):
    """書き込みがタイムアウトした。"""


class ArticleRepository:
    """
    ArticleRecord を Supabase の articles テーブルに insert する。

    upsert はしない。同じページを再処理すると行が重複する。
    """

    def __init__(
        self,
        supabase_client: Client,
        *,
        settings: Optional[SupabaseSettings] = None,
    ) -> None:
        self._supabase = supabase_client
        self._settings = settings or get_supabase_settings()

    @property
    def table(self) -> str:
        return self._settings.articles_table

    def insert(self, record: ArticleRecord) -> None:
        """
        レコードを 1 行 insert する。

        :raises ArticleWriteTimeoutError: タイムアウト
        :raises ArticleWriteError: その他すべてのバックエンドエラー
        """
        row = record.model_dump()
        try:
            self._supabase.table(self.table).insert(row).execute()
        except httpx.TimeoutException as exc:
            raise ArticleWriteTimeoutError(
                f"Timed out inserting into {self.table}."
            ) from exc
        except Exception as exc:  # noqa: BLE001 - postgrest の APIError / 通信エラーをまとめて扱う
            raise ArticleWriteError(f"Failed to insert into {self.table}: {exc}") from exc

        logger.info("Inserted article row. table=%s title=%s", self.table, record.title)
