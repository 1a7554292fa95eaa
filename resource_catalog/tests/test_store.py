import copy

import pytest

from resource_catalog.models import NodeData, NodePatch, NodeShape
from resource_catalog.search import search
from resource_catalog.seed import SEED_CATEGORIES
from resource_catalog.store import CatalogStore, create_resource_service, generate_id
from resource_catalog.tree import MAX_DEPTH, TreeDepthError, check_forest, find_lineage


@pytest.fixture
def store():
    return CatalogStore(SEED_CATEGORIES)


def node_by_id(forest, node_id):
    found = find_lineage(forest, node_id)
    assert found is not None, f"{node_id} not in forest"
    return found[1][-1]


def dump(forest):
    return [category.model_dump() for category in forest]


def test_seed_is_deep_copied():
    seed = copy.deepcopy(SEED_CATEGORIES)
    store = CatalogStore(seed)
    seed[1]["items"][0]["name"] = "Changed"
    seed[1]["items"].clear()
    assert node_by_id(store.get_snapshot(), "account").name == "Account"


def test_snapshot_independence(store):
    snapshot = store.get_snapshot()
    snapshot[1].items[0].name = "Mutated"
    snapshot[1].items[0].children.clear()
    snapshot[0].items.append(snapshot[2].items[0])
    fresh = store.get_snapshot()
    assert node_by_id(fresh, "account").name == "Account"
    assert len(node_by_id(fresh, "account").children) == 2
    assert fresh[0].items == []


def test_earlier_snapshot_not_changed_by_mutation(store):
    before = store.get_snapshot()
    before_dump = dump(before)
    store.add_resource(["account"], {"name": "New Field"})
    store.update_resource("contact", {"name": "Person"})
    store.delete_resource("api")
    assert dump(before) == before_dump


def test_add_at_root_uses_first_matching_category(store):
    forest = store.add_resource([], NodeData(name="Loose"))
    assert store.last_applied
    assert [item.name for item in forest[0].items] == ["Loose"]
    assert forest[0].id == "all-resources"


def test_add_at_root_without_matching_category_is_noop(store):
    before = dump(store.get_snapshot())
    forest = store.add_resource([], {"name": "Orphan", "kind": "formula"})
    assert not store.last_applied
    assert dump(forest) == before
    assert store.revision == 0


def test_add_nested_to_container(store):
    forest = store.add_resource([{"id": "account"}], {"name": "Owner", "description": "who owns it", "has_details": True})
    children = node_by_id(forest, "account").children
    assert len(children) == 3
    new = children[-1]
    assert new.name == "Owner"
    assert new.description == "who owns it"
    assert new.has_details is True
    assert new.children is None
    assert new.id not in {"account-entire", "account-relationship"}
    assert new.id in store


def test_add_nested_to_empty_container(store):
    store.add_resource(["account"], NodeData(name="Folder", expandable=True))
    folder = node_by_id(store.get_snapshot(), "account").children[-1]
    assert folder.children == []
    forest = store.add_resource(["account", folder.id], NodeData(name="Inside"))
    assert [c.name for c in node_by_id(forest, folder.id).children] == ["Inside"]


def test_add_under_leaf_initializes_children(store):
    forest = store.add_resource(["account", "account-entire"], NodeData(name="Detail"))
    entire = node_by_id(forest, "account-entire")
    assert [c.name for c in entire.children] == ["Detail"]
    assert entire.shape is NodeShape.CONTAINER


def test_add_with_unresolvable_path_is_noop(store):
    before = dump(store.get_snapshot())
    forest = store.add_resource(["account", "missing"], NodeData(name="Ghost"))
    assert not store.last_applied
    assert dump(forest) == before
    # path that walks through a leaf
    store.add_resource(["account", "account-entire", "deeper"], NodeData(name="Ghost"))
    assert not store.last_applied
    assert dump(store.get_snapshot()) == before


def test_add_with_overlong_unresolvable_path_is_noop(store):
    before = dump(store.get_snapshot())
    forest = store.add_resource([f"missing{i}" for i in range(MAX_DEPTH + 6)], {"name": "Ghost"})
    assert not store.last_applied
    assert dump(forest) == before


def test_add_below_deepest_level_rejected():
    node = {"id": f"n{MAX_DEPTH - 1}", "name": "deepest", "children": []}
    for depth in reversed(range(MAX_DEPTH - 1)):
        node = {"id": f"n{depth}", "name": f"n{depth}", "children": [node]}
    store = CatalogStore([{"id": "c", "name": "C", "items": [node]}])
    path = [f"n{depth}" for depth in range(MAX_DEPTH)]

    store.add_resource(path[:-1], {"name": "Sibling"})
    assert store.last_applied
    with pytest.raises(TreeDepthError):
        store.add_resource(path, {"name": "Too deep"})
    assert store.revision == 1


def test_ids_stay_unique_across_adds(store):
    for i in range(50):
        store.add_resource(["contact"], {"name": f"Field {i}"})
    ids = check_forest(store.get_snapshot())
    assert len(ids) == len(store)


def test_colliding_generated_id_is_retried():
    candidates = iter(["account", "account", "fresh-id"])
    store = CatalogStore(SEED_CATEGORIES, id_factory=lambda: next(candidates))
    forest = store.add_resource([], {"name": "New"})
    assert forest[0].items[0].id == "fresh-id"


def test_generate_id_format():
    first, second = generate_id(), generate_id()
    assert first.startswith("resource_")
    assert len(first.split("_")[-1]) == 9
    assert first != second


def test_update_merges_supplied_fields_only(store):
    forest = store.update_resource("api-config", NodePatch(name="API Config", has_details=True))
    node = node_by_id(forest, "api-config")
    assert node.name == "API Config"
    assert node.has_details is True
    assert node.icon == "settings"
    assert node.children is None
    assert store.last_applied


def test_update_can_clear_description_but_not_name(store):
    store.update_resource("api", {"description": "Public API"})
    forest = store.update_resource("api", {"description": None, "name": None})
    node = node_by_id(forest, "api")
    assert node.description is None
    assert node.name == "API"


def test_update_keeps_empty_children_distinct(store):
    store.add_resource(["api"], NodeData(name="Webhooks", expandable=True))
    webhooks = node_by_id(store.get_snapshot(), "api").children[-1]
    forest = store.update_resource(webhooks.id, {"name": "Hooks"})
    assert node_by_id(forest, webhooks.id).children == []
    assert node_by_id(forest, "api-config").children is None


def test_update_rejects_unknown_fields(store):
    with pytest.raises(ValueError):
        store.update_resource("api", {"id": "other"})
    with pytest.raises(ValueError):
        store.update_resource("api", {"children": []})


def test_update_missing_id_is_noop(store):
    before = dump(store.get_snapshot())
    forest = store.update_resource("nope", {"name": "Ghost"})
    assert not store.last_applied
    assert dump(forest) == before


def test_delete_removes_whole_subtree(store):
    forest = store.delete_resource("account-relationship")
    assert store.last_applied
    assert [c.id for c in node_by_id(forest, "account").children] == ["account-entire"]
    assert "account-id" not in store
    store.update_resource("account-id", {"name": "Back"})
    assert not store.last_applied
    assert search(store.get_snapshot(), "Account ID") == []


def test_delete_top_level_item(store):
    forest = store.delete_resource("api")
    assert forest[2].items == []
    assert len(store) == len(check_forest(forest))


def test_delete_missing_id_is_noop(store):
    before = dump(store.get_snapshot())
    assert dump(store.delete_resource("nope")) == before
    assert not store.last_applied


def test_revision_counts_applied_mutations(store):
    store.add_resource(["account"], {"name": "A"})
    store.delete_resource("nope")
    store.update_resource("contact", {"name": "C"})
    assert store.revision == 2


def test_duplicate_ids_rejected_on_ingestion():
    forest = [{"id": "c", "name": "C", "items": [{"id": "x", "name": "X", "children": [{"id": "x", "name": "X again"}]}]}]
    with pytest.raises(ValueError, match="Duplicate"):
        CatalogStore(forest)


def test_too_deep_forest_rejected():
    node = {"id": "n0", "name": "n0"}
    for depth in range(1, MAX_DEPTH + 2):
        node = {"id": f"n{depth}", "name": f"n{depth}", "children": [node]}
    with pytest.raises(TreeDepthError):
        CatalogStore([{"id": "c", "name": "C", "items": [node]}])


def test_factory_returns_store():
    service = create_resource_service(SEED_CATEGORIES)
    assert isinstance(service, CatalogStore)
    assert len(service.get_snapshot()) == 3
