# backend/article_sync/storage/client.py

"""
Supabase クライアントの生成を担当するモジュール。

Storage（画像アップロード）と Postgres（articles テーブル）は
同じ supabase.Client を共有する。プロセス起動時に 1 度だけ生成し、
以降は読み取り専用で使い回す。
"""

from typing import Optional

from supabase import Client, ClientOptions, create_client

from .config import SupabaseSettings, get_supabase_settings


def create_supabase_client(settings: Optional[SupabaseSettings] = None) -> Client:
    """
    設定値から supabase.Client を生成する。

    PostgREST / Storage の両方にタイムアウトを設定しておく
    （未設定だと上流がハングした際にリクエストが戻らない）。
    """
    settings = settings or get_supabase_settings()

    options = ClientOptions(
        postgrest_client_timeout=settings.timeout_seconds,
        storage_client_timeout=int(settings.timeout_seconds),
    )
    return create_client(settings.url, settings.api_key, options=options)
