# backend/article_sync/images/transcoder.py

"""
画像バイト列を WebP に変換するモジュール（Pillow 利用）。
"""

from io import BytesIO

from PIL import Image, UnidentifiedImageError

from .errors import ImageTranscodeError

WEBP_CONTENT_TYPE = "image/webp"

# WebP がそのまま扱えるモード
_WEBP_MODES = {"RGB", "RGBA"}


def _has_alpha(image: Image.Image) -> bool:
    if image.mode in ("LA", "PA", "RGBa", "La"):
        return True
    return image.mode == "P" and "transparency" in image.info


def transcode_to_webp(data: bytes, quality: int = 80) -> bytes:
    """
    任意形式の画像バイト列を WebP に変換して返す。

    - アニメーション画像は先頭フレームのみを使う
    - パレット / CMYK / グレースケール等は RGB（透過があれば RGBA）に変換する

    :raises ImageTranscodeError: デコードできない / 保存に失敗した場合
    """
    if not data:
        raise ImageTranscodeError("Image data is empty.")

    buffer = BytesIO()
    try:
        with Image.open(BytesIO(data)) as image:
            image.load()
            working = image
            if working.mode not in _WEBP_MODES:
                working = working.convert("RGBA" if _has_alpha(working) else "RGB")
            working.save(buffer, format="WEBP", quality=quality)
    except (UnidentifiedImageError, Image.DecompressionBombError) as exc:
        raise ImageTranscodeError(f"Unsupported or malformed image: {exc}") from exc
    except (OSError, ValueError) as exc:
        raise ImageTranscodeError(f"Failed to encode image as WebP: {exc}") from exc

    return buffer.getvalue()
