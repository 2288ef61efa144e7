from typing import Iterable, List

from sqlalchemy import delete
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Query, Session

from ..exceptions import ArticleStoreError
from ..models.news_article import NewsArticle


class ArticleRepository:
    def __init__(self, session: Session):
        self.session = session

    def latest_query(self) -> Query:
        return self.session.query(NewsArticle).order_by(
            NewsArticle.published_at.desc().nulls_last(), NewsArticle.id.desc()
        )

    def list_latest(self) -> List[NewsArticle]:
        try:
            return self.latest_query().all()
        except SQLAlchemyError as e:
            raise ArticleStoreError(f"Failed to read articles: {e}") from e

    def count(self) -> int:
        return self.session.query(NewsArticle).count()

    def create(self, article: NewsArticle) -> NewsArticle:
        try:
            self.session.add(article)
            self.session.commit()
            self.session.refresh(article)
            return article
        except SQLAlchemyError as e:
            self.session.rollback()
            raise ArticleStoreError(f"Failed to save article: {e}") from e

    def replace_all(self, articles: Iterable[NewsArticle]) -> int:
        """
        Delete every stored article, then insert ``articles``.

        Both statements run in the same transaction; on failure nothing is
        committed and the previous snapshot stays in place.
        """
        articles = list(articles)
        try:
            self.session.execute(delete(NewsArticle))
            self.session.flush()
            self.session.add_all(articles)
            self.session.commit()
            return len(articles)
        except SQLAlchemyError as e:
            self.session.rollback()
            raise ArticleStoreError(f"Failed to replace articles: {e}") from e
