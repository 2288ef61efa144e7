from sqlalchemy import Column, Integer, String, Text, DateTime

from ..core.database import Base


class NewsArticle(Base):
    """
    One news item. Rows are replaced wholesale on every sync, so the
    autoincrement id is the only key and carries no meaning across syncs.
    """
    __tablename__ = "news_articles"

    id = Column(Integer, primary_key=True, autoincrement=True)

    title = Column(String(1000))
    description = Column(Text)
    url = Column(String(2000))
    image_url = Column(String(2000))

    # Naive UTC
    published_at = Column(DateTime, index=True)

    def __repr__(self):
        return f"<NewsArticle(id={self.id}, title='{self.title}', published_at={self.published_at})>"
