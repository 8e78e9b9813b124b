# backend/article_sync/main.py

"""
バックエンドアプリケーションのエントリーポイント。

主な責務:
- GET /api/{page_id} エンドポイントを公開する
- エラーレスポンスを {"error": "..."} 形式に揃える
"""

from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from article_sync.articles.factory import build_article_sync_service
from article_sync.articles.router import router as articles_router
from article_sync.articles.service import ArticleSyncService


async def _http_exception_handler(
    request: Request,
    exc: StarletteHTTPException,
) -> JSONResponse:
    """HTTPException の detail を {"error": detail} として返す。"""
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


def create_app(service: Optional[ArticleSyncService] = None) -> FastAPI:
    """
    FastAPI アプリケーションファクトリ。

    - 記事同期エンドポイント (/api/{page_id})
    - ヘルスチェックエンドポイント (/health)

    :param service: 注入する ArticleSyncService。省略時は環境変数から組み立てる
                    （必須の環境変数が無ければ EnvVarMissingError）。
    """
    app = FastAPI(title="Notion Article Sync")

    app.state.article_sync_service = service or build_article_sync_service()

    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)

    # ルーター登録
    app.include_router(articles_router)

    @app.get("/health", tags=["health"])
    def health_check() -> dict:
        """
        簡易ヘルスチェックエンドポイント。
        モニタリングや動作確認用。
        """
        return {"status": "ok"}

    return app
