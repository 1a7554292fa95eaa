import pytest

from resource_catalog.models import coerce_forest
from resource_catalog.search import SEPARATOR, iter_matches, search
from resource_catalog.seed import SEED_CATEGORIES
from resource_catalog.tree import root_view


@pytest.fixture
def forest():
    return coerce_forest(SEED_CATEGORIES)


def test_full_path_label(forest):
    results = search(forest, "Account ID")
    assert len(results) == 1
    assert results[0].name == "Account > Relationship Fields > Account ID"
    assert results[0].id == "account-id"


def test_case_insensitive(forest):
    names = [r.name for r in search(forest, "eMAIL")]
    assert names == ["Contact > Contact Fields > Email"]


def test_blank_query_is_root_view(forest):
    assert search(forest, "") == root_view(forest)
    assert search(forest, "   ") == root_view(forest)


def test_top_level_match_has_no_leading_separator(forest):
    result = search(forest, "api")[0]
    assert result.name == "API"
    assert not result.name.startswith(SEPARATOR)


def test_ancestor_and_descendants_reported_separately(forest):
    ids = [r.id for r in search(forest, "api")]
    assert ids == ["api", "api-config", "api-endpoints"]


def test_results_in_traversal_order(forest):
    ids = [r.id for r in search(forest, "id")]
    assert ids == ["account-id", "contact-id", "created-by-id", "individual-id", "last-modified-by-id", "manager-id"]


def test_match_keeps_other_fields(forest):
    account = search(forest, "Account")[0]
    assert account.id == "account"
    assert account.has_details is True
    assert [c.id for c in account.children] == ["account-entire", "account-relationship"]


def test_search_does_not_rename_the_forest(forest):
    search(forest, "Account ID")
    assert forest[1].items[0].children[1].children[0].name == "Account ID"


def test_iter_matches_breadcrumbs(forest):
    match = next(iter_matches(forest, "phone"))
    assert [e.id for e in match.breadcrumbs] == ["contact", "contact-fields", "contact-phone"]
    assert match.label == "Contact > Contact Fields > Phone"
