from .news_article import NewsArticle

__all__ = ["NewsArticle"]
