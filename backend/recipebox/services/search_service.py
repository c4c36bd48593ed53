"""
Recipe search service: filtered, paginated search plus title suggestions
and popular tag ranking.
"""

import time
from typing import List, Optional

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from loguru import logger

from recipebox.core.config import settings
from recipebox.schemas.search import (
    PopularTag,
    RecipeSummary,
    SearchFilters,
    SearchResult,
)
from recipebox.services.search_query import (
    build_popular_tags_query,
    build_search_query,
    build_suggestion_query,
)
from recipebox.utils.exceptions import SearchQueryError


class SearchService:
    """
    Service for recipe search.

    Stateless: the session is supplied per call and the selection and count
    reads are issued independently, without a shared transaction.
    """

    def __init__(
        self,
        default_page_size: Optional[int] = None,
        min_suggestion_prefix: Optional[int] = None,
    ):
        if default_page_size is None:
            default_page_size = settings.SEARCH_DEFAULT_PAGE_SIZE
        if min_suggestion_prefix is None:
            min_suggestion_prefix = settings.SUGGESTION_MIN_PREFIX
        self.default_page_size = default_page_size
        self.min_suggestion_prefix = min_suggestion_prefix

    async def search(self, filters: SearchFilters, db: AsyncSession) -> SearchResult:
        """
        Run a filtered recipe search.

        Args:
            filters: Search filters parsed from the request
            db: Database session

        Returns:
            SearchResult with the current page and pagination metadata

        Raises:
            SearchQueryError: If either the selection or the count query fails
        """
        page_size = filters.limit if filters.limit is not None else self.default_page_size
        effective = filters.model_copy(update={"limit": page_size})
        query = build_search_query(effective)

        start = time.time()
        try:
            result = await db.execute(text(query.select_sql), query.select_params)
            rows = result.mappings().all()
        except SQLAlchemyError as e:
            raise SearchQueryError("failed to execute search query", detail=str(e)) from e

        try:
            count_result = await db.execute(text(query.count_sql), query.count_params)
            total_count = count_result.scalar_one()
        except SQLAlchemyError as e:
            raise SearchQueryError("failed to get total count", detail=str(e)) from e

        recipes = [RecipeSummary.model_validate(dict(row)) for row in rows]
        logger.debug(
            f"Search matched {total_count} recipes, returned {len(recipes)} "
            f"in {(time.time() - start) * 1000:.1f}ms"
        )
        return SearchResult.create(
            recipes=recipes,
            total_count=total_count,
            page_size=page_size,
            offset=filters.offset,
        )

    async def suggestions(self, prefix: str, limit: int, db: AsyncSession) -> List[str]:
        """
        Suggest recipe titles that start with the given prefix.

        Prefixes shorter than the configured minimum return an empty list
        without querying the database.
        """
        prefix = (prefix or "").strip()
        if len(prefix) < self.min_suggestion_prefix:
            return []

        sql, params = build_suggestion_query(prefix, limit)
        try:
            result = await db.execute(text(sql), params)
        except SQLAlchemyError as e:
            raise SearchQueryError("failed to get suggestions", detail=str(e)) from e
        return [row[0] for row in result.all()]

    async def popular_tags(self, limit: int, db: AsyncSession) -> List[PopularTag]:
        """Return the most used tags, ties broken alphabetically."""
        sql, params = build_popular_tags_query(limit)
        try:
            result = await db.execute(text(sql), params)
        except SQLAlchemyError as e:
            raise SearchQueryError("failed to get popular tags", detail=str(e)) from e
        return [PopularTag.model_validate(dict(row)) for row in result.mappings().all()]
