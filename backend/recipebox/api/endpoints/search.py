"""
Recipe search API endpoints.
"""

from enum import Enum
from typing import List, Optional, Type, TypeVar

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.datastructures import QueryParams
from loguru import logger

from recipebox.core.config import settings
from recipebox.core.database import get_db
from recipebox.core.rate_limit import limiter, SEARCH_LIMIT
from recipebox.models.user import User
from recipebox.schemas.search import (
    Difficulty,
    PopularTag,
    SearchFilters,
    SearchResult,
    SortField,
    SortOrder,
)
from recipebox.services.auth_service import get_current_user_optional
from recipebox.services.search_service import SearchService
from recipebox.utils.validators import (
    parse_csv,
    parse_int_list,
    parse_optional_bool,
    parse_optional_int,
)

router = APIRouter()
search_service = SearchService()

E = TypeVar("E", bound=Enum)


def get_search_service() -> SearchService:
    return search_service


def _parse_enum(enum_cls: Type[E], value: Optional[str]) -> Optional[E]:
    if not value:
        return None
    try:
        return enum_cls(value.strip().lower())
    except ValueError:
        return None


def parse_search_filters(params: QueryParams, max_page_size: Optional[int] = None) -> SearchFilters:
    """
    Build search filters from query-string parameters.

    Malformed or out-of-range values are dropped and treated as absent
    instead of failing the request.
    """
    max_page_size = max_page_size or settings.SEARCH_MAX_PAGE_SIZE

    def non_negative(name: str) -> Optional[int]:
        return parse_optional_int(params.get(name), minimum=0)

    return SearchFilters(
        query=(params.get("q") or "").strip(),
        user_id=non_negative("user_id"),
        difficulty=_parse_enum(Difficulty, params.get("difficulty")),
        tags=parse_csv(params.getlist("tags")),
        categories=parse_int_list(params.getlist("categories")),
        min_prep_time=non_negative("min_prep_time"),
        max_prep_time=non_negative("max_prep_time"),
        min_cook_time=non_negative("min_cook_time"),
        max_cook_time=non_negative("max_cook_time"),
        min_servings=non_negative("min_servings"),
        max_servings=non_negative("max_servings"),
        is_public=parse_optional_bool(params.get("is_public")),
        sort_by=_parse_enum(SortField, params.get("sort_by")),
        sort_order=_parse_enum(SortOrder, params.get("sort_order")) or SortOrder.DESC,
        limit=parse_optional_int(params.get("limit"), minimum=1, maximum=max_page_size),
        offset=non_negative("offset"),
    )


@router.get("", response_model=SearchResult)
@limiter.limit(SEARCH_LIMIT)
async def search_recipes(
    request: Request,
    current_user: Optional[User] = Depends(get_current_user_optional),
    service: SearchService = Depends(get_search_service),
    db: AsyncSession = Depends(get_db),
):
    """
    Search recipes.

    Query parameters: ``q``, ``user_id``, ``difficulty``, ``tags`` (comma
    separated), ``categories`` (comma separated ids), ``min_/max_prep_time``,
    ``min_/max_cook_time``, ``min_/max_servings``, ``is_public``,
    ``sort_by``, ``sort_order``, ``limit`` and ``offset``.
    """
    filters = parse_search_filters(request.query_params)
    logger.info(
        f"Processing recipe search q={filters.query!r} tags={filters.tags} "
        f"limit={filters.limit} offset={filters.offset}"
    )
    return await service.search(filters, db)


@router.get("/suggestions", response_model=List[str])
@limiter.limit(SEARCH_LIMIT)
async def get_suggestions(
    request: Request,
    service: SearchService = Depends(get_search_service),
    db: AsyncSession = Depends(get_db),
):
    """Suggest recipe titles for a typed prefix (``q``)."""
    prefix = request.query_params.get("q") or ""
    limit = parse_optional_int(
        request.query_params.get("limit"), minimum=1, maximum=settings.SEARCH_MAX_PAGE_SIZE
    ) or settings.SUGGESTION_DEFAULT_LIMIT
    logger.debug(f"Getting search suggestions for {prefix!r}")
    return await service.suggestions(prefix, limit, db)


@router.get("/tags/popular", response_model=List[PopularTag])
@limiter.limit(SEARCH_LIMIT)
async def get_popular_tags(
    request: Request,
    service: SearchService = Depends(get_search_service),
    db: AsyncSession = Depends(get_db),
):
    """Most used tags, by number of recipes."""
    limit = parse_optional_int(
        request.query_params.get("limit"), minimum=1, maximum=settings.SEARCH_MAX_PAGE_SIZE
    ) or settings.POPULAR_TAGS_DEFAULT_LIMIT
    logger.debug(f"Getting popular tags, limit={limit}")
    return await service.popular_tags(limit, db)
