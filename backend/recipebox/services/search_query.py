"""
SQL assembly for recipe search, title suggestions and popular tags.

Queries are plain SQL strings with numbered bind names (``:p1``, ``:p2`` ...)
meant for ``sqlalchemy.text``. Filter values and pagination values are kept
in separate parameter maps from the moment they are bound, so the count
query can reuse the filter predicates without the LIMIT/OFFSET arguments.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from recipebox.schemas.search import SearchFilters, SortField, SortOrder


RECIPE_COLUMNS = (
    "r.id, r.user_id, r.title, r.description, r.instructions, "
    "r.prep_time, r.cook_time, r.servings, r.difficulty, "
    "r.image_url, r.is_public, r.created_at, r.updated_at"
)

SEARCH_DOCUMENT = (
    "r.title || ' ' || COALESCE(r.description, '') || ' ' || COALESCE(r.instructions, '')"
)
SEARCH_VECTOR = f"to_tsvector('english', {SEARCH_DOCUMENT})"

SORT_EXPRESSIONS = {
    SortField.CREATED_AT: "r.created_at",
    SortField.TITLE: "r.title",
    SortField.PREP_TIME: "COALESCE(r.prep_time, 0)",
    SortField.COOK_TIME: "COALESCE(r.cook_time, 0)",
}

SORT_DIRECTIONS = {
    SortOrder.ASC: "ASC",
    SortOrder.DESC: "DESC",
}

TIE_BREAK = "r.created_at DESC, r.id DESC"


@dataclass(frozen=True)
class SearchQuery:
    """A selection query and its count query over the same predicates."""
    select_sql: str
    count_sql: str
    filter_params: Dict[str, Any]
    page_params: Dict[str, Any]

    @property
    def select_params(self) -> Dict[str, Any]:
        """Parameters for ``select_sql``: filters first, then LIMIT/OFFSET."""
        return {**self.filter_params, **self.page_params}

    @property
    def count_params(self) -> Dict[str, Any]:
        """Parameters for ``count_sql``: filter values only."""
        return dict(self.filter_params)


@dataclass
class SearchQueryBuilder:
    """
    Accumulates predicates and their bind values.

    Every call to :meth:`bind_filter` or :meth:`bind_page` allocates the
    next placeholder number, so numbering is sequential across both maps.
    """
    conditions: List[str] = field(default_factory=list)
    filter_params: Dict[str, Any] = field(default_factory=dict)
    page_params: Dict[str, Any] = field(default_factory=dict)
    _index: int = 0

    def _next_name(self) -> str:
        self._index += 1
        return f"p{self._index}"

    def bind_filter(self, value: Any) -> str:
        name = self._next_name()
        self.filter_params[name] = value
        return f":{name}"

    def bind_page(self, value: Any) -> str:
        name = self._next_name()
        self.page_params[name] = value
        return f":{name}"

    def bind_list(self, values: List[Any]) -> str:
        """Bind each value and return the comma-joined placeholders."""
        return ", ".join(self.bind_filter(value) for value in values)

    def where(self, condition: str) -> None:
        self.conditions.append(condition)

    @property
    def where_clause(self) -> str:
        if not self.conditions:
            return ""
        return "WHERE " + " AND ".join(self.conditions)


def resolve_sort(filters: SearchFilters) -> SortField:
    """
    Pick the effective sort field.

    Relevance is the default when there is a text query and is meaningless
    without one, in which case creation time is used.
    """
    has_query = bool(filters.query.strip())
    if has_query:
        return filters.sort_by or SortField.RELEVANCE
    if filters.sort_by is None or filters.sort_by == SortField.RELEVANCE:
        return SortField.CREATED_AT
    return filters.sort_by


def build_order_by(filters: SearchFilters, query_placeholder: Optional[str]) -> str:
    sort_field = resolve_sort(filters)
    direction = SORT_DIRECTIONS[filters.sort_order]

    if sort_field == SortField.RELEVANCE and query_placeholder:
        rank = f"ts_rank({SEARCH_VECTOR}, plainto_tsquery('english', {query_placeholder}))"
        return f"ORDER BY {rank} DESC, {TIE_BREAK}"
    if sort_field == SortField.CREATED_AT:
        return f"ORDER BY r.created_at {direction}, r.id {direction}"
    return f"ORDER BY {SORT_EXPRESSIONS[sort_field]} {direction}, {TIE_BREAK}"


def _add_filter_predicates(builder: SearchQueryBuilder, filters: SearchFilters) -> Optional[str]:
    """Append one predicate per present filter; return the text query placeholder."""
    query_placeholder = None
    text = filters.query.strip()
    if text:
        query_placeholder = builder.bind_filter(text)
        builder.where(f"({SEARCH_VECTOR} @@ plainto_tsquery('english', {query_placeholder}))")

    if filters.user_id is not None:
        builder.where(f"r.user_id = {builder.bind_filter(filters.user_id)}")

    if filters.difficulty is not None:
        builder.where(f"r.difficulty = {builder.bind_filter(filters.difficulty.value)}")

    if filters.tags:
        placeholders = builder.bind_list(filters.tags)
        builder.where(
            "EXISTS (SELECT 1 FROM recipe_tags rt JOIN tags t ON rt.tag_id = t.id "
            f"WHERE rt.recipe_id = r.id AND t.name IN ({placeholders}))"
        )

    if filters.categories:
        placeholders = builder.bind_list(filters.categories)
        builder.where(
            "EXISTS (SELECT 1 FROM recipe_categories rc "
            f"WHERE rc.recipe_id = r.id AND rc.category_id IN ({placeholders}))"
        )

    # An unspecified prep or cook time satisfies either bound
    if filters.min_prep_time is not None:
        builder.where(f"(r.prep_time >= {builder.bind_filter(filters.min_prep_time)} OR r.prep_time IS NULL)")
    if filters.max_prep_time is not None:
        builder.where(f"(r.prep_time <= {builder.bind_filter(filters.max_prep_time)} OR r.prep_time IS NULL)")
    if filters.min_cook_time is not None:
        builder.where(f"(r.cook_time >= {builder.bind_filter(filters.min_cook_time)} OR r.cook_time IS NULL)")
    if filters.max_cook_time is not None:
        builder.where(f"(r.cook_time <= {builder.bind_filter(filters.max_cook_time)} OR r.cook_time IS NULL)")

    if filters.min_servings is not None:
        builder.where(f"r.servings >= {builder.bind_filter(filters.min_servings)}")
    if filters.max_servings is not None:
        builder.where(f"r.servings <= {builder.bind_filter(filters.max_servings)}")

    if filters.is_public is not None:
        builder.where(f"r.is_public = {builder.bind_filter(filters.is_public)}")

    return query_placeholder


def build_search_query(filters: SearchFilters) -> SearchQuery:
    """
    Translate search filters into a paginated selection query and a count query.

    Args:
        filters: Search filters; ``limit`` and ``offset`` are applied only when set

    Returns:
        SearchQuery whose count query shares the selection's WHERE clause
    """
    builder = SearchQueryBuilder()
    query_placeholder = _add_filter_predicates(builder, filters)
    where_clause = builder.where_clause
    order_by = build_order_by(filters, query_placeholder)

    pagination = []
    if filters.limit is not None:
        pagination.append(f"LIMIT {builder.bind_page(filters.limit)}")
    if filters.offset is not None:
        pagination.append(f"OFFSET {builder.bind_page(filters.offset)}")

    select_parts = [f"SELECT {RECIPE_COLUMNS}", "FROM recipes r"]
    if where_clause:
        select_parts.append(where_clause)
    select_parts.append(order_by)
    select_parts.extend(pagination)

    count_parts = ["SELECT COUNT(*)", "FROM recipes r"]
    if where_clause:
        count_parts.append(where_clause)

    return SearchQuery(
        select_sql="\n".join(select_parts),
        count_sql="\n".join(count_parts),
        filter_params=builder.filter_params,
        page_params=builder.page_params,
    )


def escape_like(value: str) -> str:
    """Escape LIKE wildcards so the value matches literally."""
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def build_suggestion_query(prefix: str, limit: int) -> Tuple[str, Dict[str, Any]]:
    """
    Titles starting with ``prefix`` (case-insensitive), shortest first.

    Both sides are folded by the database so they agree on which characters
    have a lower case.
    """
    builder = SearchQueryBuilder()
    pattern = builder.bind_filter(escape_like(prefix) + "%")
    limit_placeholder = builder.bind_page(limit)
    sql = "\n".join([
        "SELECT title",
        "FROM recipes",
        f"WHERE lower(title) LIKE lower({pattern}) ESCAPE '\\'",
        "GROUP BY title",
        "ORDER BY length(title), title",
        f"LIMIT {limit_placeholder}",
    ])
    return sql, {**builder.filter_params, **builder.page_params}


def build_popular_tags_query(limit: int) -> Tuple[str, Dict[str, Any]]:
    """Tags ranked by how many recipes use them, ties broken by name."""
    builder = SearchQueryBuilder()
    limit_placeholder = builder.bind_page(limit)
    sql = "\n".join([
        "SELECT t.id, t.name, t.color, t.created_at, COUNT(rt.recipe_id) AS recipe_count",
        "FROM tags t",
        "JOIN recipe_tags rt ON rt.tag_id = t.id",
        "GROUP BY t.id, t.name, t.color, t.created_at",
        "ORDER BY recipe_count DESC, t.name ASC",
        f"LIMIT {limit_placeholder}",
    ])
    return sql, builder.page_params
