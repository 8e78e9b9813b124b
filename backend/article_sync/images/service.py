# backend/article_sync/images/service.py

"""
カバー画像の中継サービス（Image Relay）。

1. 取得元 URL から画像をダウンロード
2. WebP に変換
3. Supabase Storage の images バケット / articles/ 配下にアップロード
4. 公開 URL を解決して返す

失敗時は ImageRelayError 系を投げるだけで、握りつぶすかどうかは呼び出し側が決める。
"""

import logging
import secrets
import string
from typing import Optional

import httpx
from supabase import Client

from article_sync.storage.config import SupabaseSettings, get_supabase_settings

from .config import ImageSettings, get_image_settings
from .errors import (
    ImageDownloadError,
    ImageRelayTimeoutError,
    ImageUploadError,
)
from .transcoder import WEBP_CONTENT_TYPE, transcode_to_webp

logger = logging.getLogger(__name__)

_SUFFIX_ALPHABET = string.ascii_lowercase + string.digits


def generate_storage_key(page_id: str, suffix_length: int = 6) -> str:
    """
    ページ ID にランダムな base36 サフィックスを付けた保存キーを返す。

    同じページを再処理しても別オブジェクトとして保存される（重複排除はしない）。
    """
    suffix = "".join(secrets.choice(_SUFFIX_ALPHABET) for _ in range(suffix_length))
    return f"{page_id}{suffix}"


class ImageRelay:
    """
    画像のダウンロード・変換・アップロードをまとめて行うサービス。

    - supabase.Client はプロセス起動時に生成したものを注入する
    - テストでは storage.from_() を持つフェイクを渡せばよい
    """

    content_type = WEBP_CONTENT_TYPE

    def __init__(
        self,
        supabase_client: Client,
        *,
        settings: Optional[SupabaseSettings] = None,
        image_settings: Optional[ImageSettings] = None,
    ) -> None:
        self._supabase = supabase_client
        self._settings = settings or get_supabase_settings()
        self._image_settings = image_settings or get_image_settings()

    @property
    def bucket(self) -> str:
        return self._settings.image_bucket

    def object_path(self, storage_key: str) -> str:
        """バケット内のオブジェクトパス（例: articles/<key>.webp）。"""
        return f"{self._settings.image_folder}/{storage_key}.webp"

    def relay_image(self, source_url: str, storage_key: str) -> str:
        """
        画像を中継し、Storage 上の公開 URL を返す。

        :raises ImageDownloadError: ダウンロード失敗
        :raises ImageTranscodeError: WebP 変換失敗
        :raises ImageUploadError: アップロード / 公開 URL 解決の失敗
        :raises ImageRelayTimeoutError: タイムアウト
        """
        raw = self._download(source_url)
        webp = transcode_to_webp(raw, quality=self._image_settings.webp_quality)

        path = self.object_path(storage_key)
        self._upload(path, webp)
        public_url = self._resolve_public_url(path)

        logger.info(
            "Relayed cover image. bucket=%s path=%s bytes=%d",
            self.bucket,
            path,
            len(webp),
        )
        return public_url

    def _download(self, source_url: str) -> bytes:
        try:
            response = httpx.get(
                source_url,
                timeout=self._image_settings.download_timeout_seconds,
                follow_redirects=True,
            )
        except httpx.TimeoutException as exc:
            raise ImageRelayTimeoutError("Timed out downloading image.") from exc
        except (httpx.RequestError, httpx.InvalidURL) as exc:
            raise ImageDownloadError(f"Failed to download image: {exc}") from exc

        if response.status_code // 100 != 2:
            raise ImageDownloadError(
                f"Image download returned status_code={response.status_code}"
            )

        content = response.content
        if not content:
            raise ImageDownloadError("Image download returned an empty body.")
        if len(content) > self._image_settings.max_bytes:
            raise ImageDownloadError(
                f"Image is too large: {len(content)} bytes "
                f"(limit {self._image_settings.max_bytes})"
            )
        return content

    def _upload(self, path: str, data: bytes) -> None:
        bucket = self._supabase.storage.from_(self.bucket)
        try:
            bucket.upload(
                path=path,
                file=data,
                file_options={"content-type": self.content_type},
            )
        except httpx.TimeoutException as exc:
            raise ImageRelayTimeoutError(f"Timed out uploading image to {path}.") from exc
        except Exception as exc:  # noqa: BLE001 - SDK の例外型はバージョンで異なる
            raise ImageUploadError(f"Failed to upload image to {path}: {exc}") from exc

    def _resolve_public_url(self, path: str) -> str:
        bucket = self._supabase.storage.from_(self.bucket)
        try:
            public_url = bucket.get_public_url(path)
        except Exception as exc:  # noqa: BLE001
            logger.warning(
                "Uploaded image is orphaned; public URL could not be resolved. "
                "bucket=%s path=%s",
                self.bucket,
                path,
            )
            raise ImageUploadError(f"Failed to resolve public URL for {path}: {exc}") from exc

        if not public_url:
            logger.warning(
                "Uploaded image is orphaned; storage returned an empty public URL. "
                "bucket=%s path=%s",
                self.bucket,
                path,
            )
            raise ImageUploadError(f"Empty public URL for {path}")
        return public_url
