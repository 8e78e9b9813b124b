# backend/article_sync/storage/__init__.py

"""
Supabase 連携モジュール。

- config: Supabase の URL / API キー / バケット / テーブル名
- client: supabase.Client の生成
"""

from .config import SupabaseSettings, get_supabase_settings  # noqa: F401
from .client import create_supabase_client  # noqa: F401
