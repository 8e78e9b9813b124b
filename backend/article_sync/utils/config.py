# backend/article_sync/utils/config.py

"""
環境変数読み取り用のユーティリティ。
Notion / Supabase / 画像処理の各設定モジュールから共通利用する。
"""

import os
from typing import Iterable, List, Optional, Sequence


class EnvVarMissingError(RuntimeError):
    """必須環境変数が設定されていない場合に投げる例外。"""

    def __init__(self, names: Sequence[str]) -> None:
        if isinstance(names, str):
            names = [names]
        self.names: List[str] = list(names)
        joined = ", ".join(f"'{name}'" for name in self.names)
        if len(self.names) == 1:
            message = f"Required environment variable {joined} is not set."
        else:
            message = f"Required environment variables {joined} are not set."
        super().__init__(message)

    @property
    def name(self) -> str:
        """最初に見つかった未設定の変数名（単数扱いの呼び出し元向け）。"""
        return self.names[0]


def get_env(
    name: str,
    default: Optional[str] = None,
    *,
    required: bool = True,
) -> str:
    """
    環境変数を取得するヘルパー。

    :param name: 環境変数名
    :param default: デフォルト値（required=False の場合のみ使用）
    :param required: True の場合、未設定なら例外を投げる
    :return: 文字列値
    """
    value = os.getenv(name)

    if value is None or value == "":
        if required:
            raise EnvVarMissingError([name])
        return default

    return value


def require_env_vars(names: Iterable[str]) -> None:
    """
    必須環境変数をまとめて検査する。

    1つずつ落とすのではなく、未設定のものを全て列挙した
    EnvVarMissingError を投げる（起動時の診断用）。
    """
    missing = [name for name in names if not os.getenv(name)]
    if missing:
        raise EnvVarMissingError(missing)


def get_env_int(name: str, default: int) -> int:
    """
    整数値の環境変数を取得するヘルパー。

    不正な値が入っていた場合は RuntimeError にする。
    """
    raw = get_env(name, required=False)
    if raw is None or raw == "":
        return default

    try:
        return int(raw)
    except ValueError as exc:  # noqa: TRY003
        raise RuntimeError(
            f"Invalid integer value for env var {name}: {raw!r}"
        ) from exc


def get_env_float(name: str, default: float) -> float:
    """
    浮動小数点値の環境変数を取得するヘルパー（主にタイムアウト秒数用）。
    """
    raw = get_env(name, required=False)
    if raw is None or raw == "":
        return default

    try:
        value = float(raw)
    except ValueError as exc:  # noqa: TRY003
        raise RuntimeError(
            f"Invalid float value for env var {name}: {raw!r}"
        ) from exc

    if value <= 0:
        raise RuntimeError(f"Env var {name} must be positive: {raw!r}")
    return value
