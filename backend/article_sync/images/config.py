# backend/article_sync/images/config.py

"""
カバー画像の中継処理（ダウンロード → WebP 変換 → アップロード）の設定値。
"""

from dataclasses import dataclass

from article_sync.utils.config import get_env_float, get_env_int


@dataclass(frozen=True)
class ImageSettings:
    """画像中継の設定値のまとまり。"""

    download_timeout_seconds: float = 15.0
    max_bytes: int = 10 * 1024 * 1024
    webp_quality: int = 80


def get_image_settings() -> ImageSettings:
    """
    ImageSettings を構築して返す。

    任意:
      - IMAGE_DOWNLOAD_TIMEOUT_SECONDS (デフォルト: 15)
      - IMAGE_MAX_BYTES                (デフォルト: 10 MiB)
      - IMAGE_WEBP_QUALITY             (デフォルト: 80, 1〜100)
    """
    download_timeout_seconds = get_env_float(
        "IMAGE_DOWNLOAD_TIMEOUT_SECONDS",
        default=15.0,
    )
    max_bytes = get_env_int("IMAGE_MAX_BYTES", default=10 * 1024 * 1024)
    webp_quality = get_env_int("IMAGE_WEBP_QUALITY", default=80)

    if max_bytes <= 0:
        raise RuntimeError(f"IMAGE_MAX_BYTES must be positive: {max_bytes}")
    if not 1 <= webp_quality <= 100:
        raise RuntimeError(f"IMAGE_WEBP_QUALITY must be between 1 and 100: {webp_quality}")

    return ImageSettings(
        download_timeout_seconds=download_timeout_seconds,
        max_bytes=max_bytes,
        webp_quality=webp_quality,
    )
