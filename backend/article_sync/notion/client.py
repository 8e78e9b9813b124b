# backend/article_sync/notion/client.py

"""
Notion API との通信を担当するクライアントモジュール。
"""

from typing import Any, Dict, List, Optional

import httpx

from .config import NotionConfig, get_notion_config


class NotionClientError(RuntimeError):
    """Notion クライアント全般の例外。"""


class NotionAuthError(NotionClientError):
    """認証・権限関連のエラー。"""


class NotionNotFoundError(NotionClientError):
    """ページ ID が不正、またはインテグレーションから参照できない場合のエラー。"""


class NotionTimeoutError(NotionClientError):
    """Notion API 呼び出しがタイムアウトした場合のエラー。"""


class NotionAPIError(NotionClientError):
    """その他 Notion API 呼び出し時のエラー。"""


class NotionClient:
    """
    Notion API の薄いラッパークライアント。

    - ページ（メタデータ）の取得
    - ブロック子要素の取得（ページネーション込み）
    """

    page_size = 100

    def __init__(self, config: Optional[NotionConfig] = None) -> None:
        self.config = config or get_notion_config()

    @property
    def timeout(self) -> float:
        return self.config.timeout_seconds

    def _build_headers(self) -> Dict[str, str]:
        """
        Notion API 呼び出しに必要なヘッダーを構築。
        """
        return {
            "Authorization": f"Bearer {self.config.api_key}",
            "Notion-Version": self.config.api_version,
            "Content-Type": "application/json",
        }

    def _raise_for_status(self, response: httpx.Response) -> None:
        """
        HTTP レスポンスコードに応じて適切な例外を投げる。

        Notion は不正な形式の ID に 400 (validation_error)、
        共有されていないページに 404 (object_not_found) を返すため、
        どちらも NotionNotFoundError として扱う。
        """
        if response.status_code == 401:
            raise NotionAuthError("Unauthorized. Check NOTION_API_KEY.")
        if response.status_code == 403:
            raise NotionAuthError("Forbidden. Check Notion integration permissions.")
        if response.status_code in (400, 404):
            raise NotionNotFoundError(
                f"Notion object not found: {response.status_code} {response.text}"
            )
        if response.status_code >= 400:
            raise NotionAPIError(
                f"Notion API error: {response.status_code} {response.text}"
            )

    def _get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        url = f"{self.config.api_base_url}{path}"

        try:
            response = httpx.get(
                url,
                headers=self._build_headers(),
                params=params,
                timeout=self.timeout,
            )
        except httpx.TimeoutException as exc:
            raise NotionTimeoutError(f"Notion API timed out: {url}") from exc
        except (httpx.RequestError, httpx.InvalidURL) as exc:
            raise NotionClientError(f"Failed to call Notion API: {exc}") from exc

        self._raise_for_status(response)

        try:
            data = response.json()
        except ValueError as exc:
            raise NotionAPIError("Notion API returned a non-JSON response.") from exc

        if not isinstance(data, dict):
            raise NotionAPIError("Unexpected Notion API response format: not an object.")
        return data

    def retrieve_page(self, page_id: str) -> Dict[str, Any]:
        """
        ページオブジェクト（properties / cover などのメタデータ）を取得する。

        返り値は Notion API の生のページオブジェクト。
        上位レイヤー（service.py）で内部モデルに変換する。
        """
        return self._get(f"/pages/{page_id}")

    def list_block_children(self, block_id: str) -> List[Dict[str, Any]]:
        """
        指定ブロック（ページ ID も可）の直下の子ブロックを全件取得する。

        has_more / next_cursor を辿って全ページ分を連結して返す。
        孫ブロックの取得は呼び出し側の責務。
        """
        blocks: List[Dict[str, Any]] = []
        cursor: Optional[str] = None

        while True:
            params: Dict[str, Any] = {"page_size": self.page_size}
            if cursor:
                params["start_cursor"] = cursor

            data = self._get(f"/blocks/{block_id}/children", params=params)

            results = data.get("results", [])
            if not isinstance(results, list):
                raise NotionAPIError(
                    "Unexpected Notion API response format: 'results' is not a list."
                )
            blocks.extend(results)

            cursor = data.get("next_cursor")
            if not data.get("has_more") or not cursor:
                break

        return blocks
