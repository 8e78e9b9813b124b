# backend/article_sync/notion/schemas.py

"""
Notion から取得したページを内部で扱うためのスキーマ定義。

Notion API の生の dict はこのモジュールのモデルに変換した時点で検証し、
それ以降のレイヤーには型付きのモデルだけを渡す。
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class CoverKind(str, Enum):
    """
    カバー画像の出所。

    - EXTERNAL: 外部 URL を直接指定したカバー（Notion 上の type="external"）
    - HOSTED: Notion にアップロードされたカバー（Notion 上の type="file"、署名付き URL）
    """

    EXTERNAL = "external"
    HOSTED = "hosted"


class CoverReference(BaseModel):
    """ページのカバー画像への参照。どちらの種別でも取得元 URL を持つ。"""

    kind: CoverKind = Field(..., description="external / hosted")
    url: str = Field(..., min_length=1, description="画像のダウンロード元 URL")


class PageMetadata(BaseModel):
    """
    ページのメタデータのうち、記事化に必要なものだけを持つモデル。
    """

    title: str = Field(..., min_length=1, description="Name プロパティのプレーンテキスト")
    cover: Optional[CoverReference] = Field(None, description="カバー画像（無ければ None）")


class FetchedPage(BaseModel):
    """
    Page Fetcher の出力。Markdown 本文とメタデータの組。
    """

    page_id: str = Field(..., description="Notion ページ ID")
    markdown: str = Field("", description="ブロックツリーを変換した Markdown")
    metadata: PageMetadata
