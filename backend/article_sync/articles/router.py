# backend/article_sync/articles/router.py

"""
記事同期用の FastAPI ルーター定義。

- GET /api/{page_id}
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Request, status

from article_sync.notion.service import (
    MissingTitleError,
    PageFetchError,
    UpstreamTimeoutError,
)

from .repository import ArticleWriteError, ArticleWriteTimeoutError
from .schemas import ArticleSyncResponse, ErrorResponse
from .service import ArticleSyncService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["articles"])

SUCCESS_MESSAGE = "article saved"
MISSING_TITLE_MESSAGE = "Name property not found"
PAGE_ERROR_MESSAGE = "error processing page"
PAGE_TIMEOUT_MESSAGE = "timed out fetching page"
DATABASE_ERROR_MESSAGE = "error saving to database"
DATABASE_TIMEOUT_MESSAGE = "timed out saving to database"


def get_article_sync_service(request: Request) -> ArticleSyncService:
    """
    create_app() で app.state に登録された ArticleSyncService を返す。

    テストでは create_app(service=...) か dependency_overrides で差し替える。
    """
    return request.app.state.article_sync_service


@router.get(
    "/{page_id}",
    response_model=ArticleSyncResponse,
    responses={
        400: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
        504: {"model": ErrorResponse},
    },
    summary="Notion ページを記事として保存",
    description=(
        "Notion ページを Markdown に変換し、カバー画像を WebP で Storage に保存したうえで "
        "articles テーブルに 1 行追加する。"
    ),
)
def sync_article(
    page_id: str,
    service: ArticleSyncService = Depends(get_article_sync_service),
) -> ArticleSyncResponse:
    """
    ページ ID を受け取り、記事として保存するエンドポイント。

    - Name プロパティ無し → 400
    - Notion 取得失敗 → 500（タイムアウトは 504）
    - DB 保存失敗 → 500（タイムアウトは 504）
    - カバー画像の失敗はここまで上がってこない（cover=None で保存される）
    """
    try:
        service.sync_page(page_id)
    except MissingTitleError as exc:
        logger.error("Page has no title property. page_id=%s", page_id)
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=MISSING_TITLE_MESSAGE,
        ) from exc
    except UpstreamTimeoutError as exc:
        logger.error("Timed out fetching Notion page. page_id=%s", page_id)
        raise HTTPException(
            status_code=status.HTTP_504_GATEWAY_TIMEOUT,
            detail=PAGE_TIMEOUT_MESSAGE,
        ) from exc
    except PageFetchError as exc:
        logger.error("Error processing Notion page. page_id=%s error=%s", page_id, exc)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=PAGE_ERROR_MESSAGE,
        ) from exc
    except ArticleWriteTimeoutError as exc:
        logger.error("Timed out saving article. page_id=%s", page_id)
        raise HTTPException(
            status_code=status.HTTP_504_GATEWAY_TIMEOUT,
            detail=DATABASE_TIMEOUT_MESSAGE,
        ) from exc
    except ArticleWriteError as exc:
        logger.error("Error saving article. page_id=%s error=%s", page_id, exc)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=DATABASE_ERROR_MESSAGE,
        ) from exc
    except Exception as exc:  # noqa: BLE001
        # 予期しない例外は 500 としてクライアントに返す（詳細はログ側で確認）
        logger.exception("Unexpected error while syncing page. page_id=%s", page_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=PAGE_ERROR_MESSAGE,
        ) from exc

    return ArticleSyncResponse(success=True, message=SUCCESS_MESSAGE)
