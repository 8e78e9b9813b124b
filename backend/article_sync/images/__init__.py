# backend/article_sync/images/__init__.py

"""
カバー画像の中継（ダウンロード → WebP 変換 → Supabase Storage へのアップロード）。
"""

from .errors import (  # noqa: F401
    ImageDownloadError,
    ImageRelayError,
    ImageRelayTimeoutError,
    ImageTranscodeError,
    ImageUploadError,
)
from .service import ImageRelay, generate_storage_key  # noqa: F401
