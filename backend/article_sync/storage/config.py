# backend/article_sync/storage/config.py

"""
Supabase（Storage / Postgres）連携に必要な設定値をまとめるモジュール。
"""

from dataclasses import dataclass

from article_sync.utils.config import get_env, get_env_float


@dataclass(frozen=True)
class SupabaseSettings:
    """
    Supabase 用の設定値コンテナ。

    バケット / フォルダ / テーブル名はデフォルトのままで運用する想定だが、
    ステージング環境などで差し替えられるよう環境変数でも上書き可能にしている。
    """

    url: str
    api_key: str
    image_bucket: str = "images"
    image_folder: str = "articles"
    articles_table: str = "articles"
    timeout_seconds: float = 10.0


def get_supabase_settings() -> SupabaseSettings:
    """
    環境変数から Supabase 設定を読み込む。

    必須:
      - SUPABASE_URL
      - SUPABASE_API_KEY

    任意:
      - SUPABASE_IMAGE_BUCKET    (デフォルト: images)
      - SUPABASE_IMAGE_FOLDER    (デフォルト: articles)
      - SUPABASE_ARTICLES_TABLE  (デフォルト: articles)
      - SUPABASE_TIMEOUT_SECONDS (デフォルト: 10)
    """
    url = get_env("SUPABASE_URL")
    api_key = get_env("SUPABASE_API_KEY")

    image_bucket = get_env("SUPABASE_IMAGE_BUCKET", default="images", required=False)
    image_folder = get_env("SUPABASE_IMAGE_FOLDER", default="articles", required=False)
    articles_table = get_env(
        "SUPABASE_ARTICLES_TABLE",
        default="articles",
        required=False,
    )
    timeout_seconds = get_env_float("SUPABASE_TIMEOUT_SECONDS", default=10.0)

    return SupabaseSettings(
        url=url,
        api_key=api_key,
        image_bucket=image_bucket,
        image_folder=image_folder.strip("/"),
        articles_table=articles_table,
        timeout_seconds=timeout_seconds,
    )
