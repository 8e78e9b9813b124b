# backend/article_sync/__init__.py

"""
Notion のページを Markdown 記事として Supabase に保存する連携サービス。
"""
