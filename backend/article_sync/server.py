# backend/article_sync/server.py

"""
プロセスのエントリーポイント（uvicorn で起動する）。

1. ログ設定
2. 設定値の検証と依存の組み立て（失敗したら exit 1）
3. HOST:PORT（デフォルト 0.0.0.0:3000）で待ち受け（bind 失敗時は uvicorn が exit 1 する）
"""

import logging
import sys
from typing import Optional

import uvicorn

from article_sync.articles.factory import build_article_sync_service
from article_sync.main import create_app
from article_sync.utils.config import get_env, get_env_int

logger = logging.getLogger(__name__)

DEFAULT_PORT = 3000


def configure_logging(level_name: Optional[str] = None) -> None:
    level_name = (level_name or get_env("LOG_LEVEL", default="INFO", required=False)).upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        force=True,
    )


def main() -> None:
    configure_logging()

    try:
        service = build_article_sync_service()
        host = get_env("HOST", default="0.0.0.0", required=False)
        port = get_env_int("PORT", default=DEFAULT_PORT)
    except RuntimeError as exc:
        # EnvVarMissingError もここで拾う（未設定の変数名はメッセージに列挙済み）
        logger.error("Invalid configuration: %s", exc)
        sys.exit(1)

    app = create_app(service)
    logger.info("Starting server on %s:%d", host, port)

    # bind に失敗した場合は uvicorn 自身がエラーをログに出して exit 1 する
    uvicorn.run(app, host=host, port=port, log_config=None)


if __name__ == "__main__":
    main()
