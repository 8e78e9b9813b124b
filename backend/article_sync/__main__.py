# backend/article_sync/__main__.py

from article_sync.server import main

main()
