# backend/article_sync/articles/schemas.py

"""
記事の保存レコードと /api/{page_id} のレスポンスモデル。
"""

from typing import Optional

from pydantic import BaseModel, Field


class ArticleRecord(BaseModel):
    """
    articles テーブルに 1 行として保存されるレコード。

    content は変換済み Markdown をそのまま保存する（空文字も可）。
    """

    title: str = Field(..., min_length=1, description="記事タイトル（Notion の Name）")
    content: str = Field("", description="Markdown 本文")
    cover: Optional[str] = Field(None, description="カバー画像の公開 URL")


class ArticleSyncResult(BaseModel):
    """ArticleSyncService.sync_page の処理結果サマリ（ログ用途）。"""

    page_id: str
    title: str
    cover: Optional[str] = None


class ArticleSyncResponse(BaseModel):
    """/api/{page_id} の成功レスポンス。"""

    success: bool = Field(True, description="常に true")
    message: str = Field(..., description="結果メッセージ")


class ErrorResponse(BaseModel):
    """/api/{page_id} のエラーレスポンス。"""

    error: str = Field(..., description="エラー内容（プレーンテキスト）")
