"""
Tests for the recipe search service.

Text search relies on PostgreSQL full-text functions, so these tests cover
the structured filters, pagination, suggestions and tag ranking against
SQLite; the full-text SQL itself is covered in test_search_query.py.
"""

import pytest
from sqlalchemy.exc import OperationalError

from recipebox.schemas.search import Difficulty, SearchFilters, SortField, SortOrder
from recipebox.services.search_service import SearchService
from recipebox.utils.exceptions import SearchQueryError
from tests.factories import (
    create_test_category,
    create_test_recipe,
    create_test_tag,
)


@pytest.fixture
def service() -> SearchService:
    return SearchService(default_page_size=20, min_suggestion_prefix=2)


@pytest.fixture
async def ten_recipes(db_session, test_user):
    """Ten public recipes; "Recipe 0" is the newest."""
    return [
        await create_test_recipe(db_session, test_user, title=f"Recipe {i}", age_minutes=i)
        for i in range(10)
    ]


class FailingSession:
    """Session stand-in whose execute fails for matching statements."""

    def __init__(self, session=None, fail_on: str = ""):
        self.session = session
        self.fail_on = fail_on
        self.calls = 0

    async def execute(self, statement, params=None):
        self.calls += 1
        if self.fail_on in str(statement):
            raise OperationalError(str(statement), params, Exception("connection reset"))
        return await self.session.execute(statement, params)


class TestPagination:
    """Pagination metadata and page walking."""

    async def test_first_page(self, service, db_session, ten_recipes):
        result = await service.search(SearchFilters(limit=3, offset=0), db_session)

        assert result.total_count == 10
        assert len(result.recipes) == 3
        assert result.page_size == 3
        assert result.current_page == 1
        assert result.has_prev is False
        assert result.has_next is True
        assert [r.title for r in result.recipes] == ["Recipe 0", "Recipe 1", "Recipe 2"]

    async def test_last_partial_page(self, service, db_session, ten_recipes):
        result = await service.search(SearchFilters(limit=3, offset=9), db_session)

        assert result.total_count == 10
        assert [r.title for r in result.recipes] == ["Recipe 9"]
        assert result.current_page == 4
        assert result.has_next is False
        assert result.has_prev is True

    async def test_walking_pages_visits_every_match_once(self, service, db_session, ten_recipes):
        seen = []
        offset = 0
        while True:
            result = await service.search(SearchFilters(limit=3, offset=offset), db_session)
            seen.extend(r.id for r in result.recipes)
            if not result.has_next:
                break
            offset += 3

        assert len(seen) == result.total_count == 10
        assert len(set(seen)) == 10

    async def test_offset_past_end(self, service, db_session, ten_recipes):
        result = await service.search(SearchFilters(limit=5, offset=50), db_session)

        assert result.recipes == []
        assert result.total_count == 10
        assert result.has_next is False

    async def test_default_page_size(self, db_session, test_user):
        for i in range(7):
            await create_test_recipe(db_session, test_user, title=f"Dish {i}", age_minutes=i)

        result = await SearchService(default_page_size=5).search(SearchFilters(), db_session)

        assert result.page_size == 5
        assert len(result.recipes) == 5
        assert result.total_count == 7
        assert result.has_next is True

    async def test_empty_database(self, service, db_session):
        result = await service.search(SearchFilters(), db_session)

        assert result.recipes == []
        assert result.total_count == 0
        assert result.current_page == 1
        assert result.has_next is False
        assert result.has_prev is False


class TestFilters:
    """Structured filters against real rows."""

    async def test_tags_match_any(self, service, db_session, test_user):
        vegan = await create_test_tag(db_session, "vegan")
        quick = await create_test_tag(db_session, "quick")
        dessert = await create_test_tag(db_session, "dessert")

        await create_test_recipe(db_session, test_user, title="Vegan Chili", tags=[vegan])
        await create_test_recipe(db_session, test_user, title="Quick Toast", tags=[quick])
        await create_test_recipe(db_session, test_user, title="Quick Vegan Bowl", tags=[vegan, quick])
        await create_test_recipe(db_session, test_user, title="Chocolate Cake", tags=[dessert])
        await create_test_recipe(db_session, test_user, title="Plain Rice")

        result = await service.search(SearchFilters(tags=["vegan", "quick"]), db_session)

        assert result.total_count == 3
        assert {r.title for r in result.recipes} == {"Vegan Chili", "Quick Toast", "Quick Vegan Bowl"}

    async def test_categories(self, service, db_session, test_user):
        dinner = await create_test_category(db_session, test_user, "Dinner")
        lunch = await create_test_category(db_session, test_user, "Lunch")

        await create_test_recipe(db_session, test_user, title="Roast", categories=[dinner])
        await create_test_recipe(db_session, test_user, title="Sandwich", categories=[lunch])
        await create_test_recipe(db_session, test_user, title="Cereal")

        result = await service.search(SearchFilters(categories=[dinner.id]), db_session)

        assert [r.title for r in result.recipes] == ["Roast"]

    async def test_prep_time_range_keeps_unknown_times(self, service, db_session, test_user):
        await create_test_recipe(db_session, test_user, title="Unknown", prep_time=None)
        await create_test_recipe(db_session, test_user, title="Twenty", prep_time=20)
        await create_test_recipe(db_session, test_user, title="Five", prep_time=5)
        await create_test_recipe(db_session, test_user, title="Forty Five", prep_time=45)

        filters = SearchFilters(min_prep_time=10, max_prep_time=30)
        result = await service.search(filters, db_session)

        assert {r.title for r in result.recipes} == {"Unknown", "Twenty"}

    async def test_cook_time_upper_bound(self, service, db_session, test_user):
        await create_test_recipe(db_session, test_user, title="Slow", cook_time=240)
        await create_test_recipe(db_session, test_user, title="Raw", cook_time=None)
        await create_test_recipe(db_session, test_user, title="Fast", cook_time=15)

        result = await service.search(SearchFilters(max_cook_time=30), db_session)

        assert {r.title for r in result.recipes} == {"Raw", "Fast"}

    async def test_servings_range(self, service, db_session, test_user):
        await create_test_recipe(db_session, test_user, title="For Two", servings=2)
        await create_test_recipe(db_session, test_user, title="For Four", servings=4)
        await create_test_recipe(db_session, test_user, title="For Twelve", servings=12)

        result = await service.search(SearchFilters(min_servings=3, max_servings=8), db_session)

        assert [r.title for r in result.recipes] == ["For Four"]

    async def test_owner_difficulty_and_visibility(self, service, db_session, test_user, other_user):
        await create_test_recipe(db_session, test_user, title="Mine Easy", difficulty="easy")
        await create_test_recipe(db_session, test_user, title="Mine Hard", difficulty="hard")
        await create_test_recipe(db_session, test_user, title="Mine Private", is_public=False)
        await create_test_recipe(db_session, other_user, title="Theirs Hard", difficulty="hard")

        mine = await service.search(SearchFilters(user_id=test_user.id), db_session)
        hard = await service.search(SearchFilters(difficulty=Difficulty.HARD), db_session)
        private = await service.search(SearchFilters(is_public=False), db_session)

        assert mine.total_count == 3
        assert {r.title for r in hard.recipes} == {"Mine Hard", "Theirs Hard"}
        assert [r.title for r in private.recipes] == ["Mine Private"]
        assert private.recipes[0].is_public is False

    async def test_sort_by_title(self, service, db_session, test_user):
        for title in ("Banana Bread", "Apple Pie", "Carrot Soup"):
            await create_test_recipe(db_session, test_user, title=title)

        filters = SearchFilters(sort_by=SortField.TITLE, sort_order=SortOrder.ASC)
        result = await service.search(filters, db_session)

        assert [r.title for r in result.recipes] == ["Apple Pie", "Banana Bread", "Carrot Soup"]

    async def test_created_at_ties_broken_by_id(self, service, db_session, test_user):
        first = await create_test_recipe(db_session, test_user, title="First")
        second = await create_test_recipe(db_session, test_user, title="Second")

        result = await service.search(SearchFilters(), db_session)

        assert [r.id for r in result.recipes] == [second.id, first.id]


class TestSuggestions:

    async def test_short_prefix_skips_database(self, service):
        session = FailingSession()

        assert await service.suggestions("p", 10, session) == []
        assert await service.suggestions("  a  ", 10, session) == []
        assert session.calls == 0

    async def test_prefix_match_shortest_first(self, service, db_session, test_user):
        for title in ("Pancakes", "Pad Thai", "Pasta Carbonara", "Banana Pancakes", "Pad Thai"):
            await create_test_recipe(db_session, test_user, title=title)

        suggestions = await service.suggestions("pa", 10, db_session)

        assert suggestions == ["Pad Thai", "Pancakes", "Pasta Carbonara"]

    async def test_limit(self, service, db_session, test_user):
        for title in ("Pancakes", "Pad Thai", "Pasta Carbonara"):
            await create_test_recipe(db_session, test_user, title=title)

        assert await service.suggestions("PA", 2, db_session) == ["Pad Thai", "Pancakes"]

    async def test_case_folding_matches_on_both_sides(self, service, db_session, test_user):
        await create_test_recipe(db_session, test_user, title="Éclairs au Chocolat")

        assert await service.suggestions("Éc", 10, db_session) == ["Éclairs au Chocolat"]
        assert await service.suggestions("ÉCLAIRS", 10, db_session) == ["Éclairs au Chocolat"]

    async def test_zero_minimum_prefix_is_honoured(self, db_session, test_user):
        await create_test_recipe(db_session, test_user, title="Pho")

        service = SearchService(min_suggestion_prefix=0)

        assert service.min_suggestion_prefix == 0
        assert SearchService(default_page_size=0).default_page_size == 0
        assert await service.suggestions("p", 10, db_session) == ["Pho"]

    async def test_wildcards_are_literal(self, service, db_session, test_user):
        await create_test_recipe(db_session, test_user, title="12 Grain Bread")
        await create_test_recipe(db_session, test_user, title="1_ Minute Mug Cake")

        assert await service.suggestions("1_", 10, db_session) == ["1_ Minute Mug Cake"]


class TestPopularTags:

    async def test_ranked_by_usage_then_name(self, service, db_session, test_user):
        vegan = await create_test_tag(db_session, "vegan")
        quick = await create_test_tag(db_session, "quick")
        dessert = await create_test_tag(db_session, "dessert")
        await create_test_tag(db_session, "unused")

        await create_test_recipe(db_session, test_user, title="One", tags=[vegan, quick])
        await create_test_recipe(db_session, test_user, title="Two", tags=[vegan, quick])
        await create_test_recipe(db_session, test_user, title="Three", tags=[vegan, quick, dessert])

        tags = await service.popular_tags(10, db_session)

        assert [(t.name, t.recipe_count) for t in tags] == [
            ("quick", 3),
            ("vegan", 3),
            ("dessert", 1),
        ]
        assert tags[0].color == "#6b7280"

    async def test_limit(self, service, db_session, test_user):
        a = await create_test_tag(db_session, "alpha")
        b = await create_test_tag(db_session, "beta")
        await create_test_recipe(db_session, test_user, tags=[a, b])

        tags = await service.popular_tags(1, db_session)

        assert [t.name for t in tags] == ["alpha"]


class TestErrors:
    """Database failures surface as SearchQueryError."""

    async def test_select_failure(self, service, db_session):
        session = FailingSession(db_session, fail_on="FROM recipes r")

        with pytest.raises(SearchQueryError) as exc_info:
            await service.search(SearchFilters(), session)

        assert "failed to execute search query" in exc_info.value.message
        assert session.calls == 1

    async def test_count_failure_returns_no_partial_result(self, service, db_session, ten_recipes):
        session = FailingSession(db_session, fail_on="COUNT(*)")

        with pytest.raises(SearchQueryError) as exc_info:
            await service.search(SearchFilters(limit=3), session)

        assert "failed to get total count" in exc_info.value.message
        assert isinstance(exc_info.value.__cause__, OperationalError)
        assert session.calls == 2

    async def test_suggestion_failure(self, service, db_session):
        session = FailingSession(db_session, fail_on="SELECT")

        with pytest.raises(SearchQueryError):
            await service.suggestions("pasta", 5, session)

    async def test_popular_tags_failure(self, service, db_session):
        session = FailingSession(db_session, fail_on="SELECT")

        with pytest.raises(SearchQueryError):
            await service.popular_tags(5, session)
