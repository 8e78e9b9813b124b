# backend/article_sync/images/errors.py

"""
画像中継処理の例外定義。

呼び出し側（ArticleSyncService）は ImageRelayError をまとめて捕捉し、
カバー画像無しとして処理を続行する。
"""


class ImageRelayError(RuntimeError):
    """画像中継処理全般の基底例外。"""


class ImageDownloadError(ImageRelayError):
    """取得元 URL からのダウンロードに失敗した（通信エラー / 4xx / 5xx / サイズ超過）。"""


class ImageTranscodeError(ImageRelayError):
    """画像データが壊れている、または未対応の形式で WebP に変換できなかった。"""


class ImageUploadError(ImageRelayError):
    """Storage へのアップロード、または公開 URL の解決に失敗した。"""


class ImageRelayTimeoutError(ImageRelayError):
    """ダウンロード / アップロードのいずれかがタイムアウトした。"""
