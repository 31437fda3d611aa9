"""
Reconciliation of remote fetches with local collections.
"""

from agency.client.reconcile import merge_collection, merge_record
from agency.client.seed import demo_project
from agency.core.config import settings
from agency.schemas.project import ProjectResponse


def _project(project_id, **fields):
    return ProjectResponse(id=project_id, title=fields.pop("title", "Project"), **fields)


def test_remote_wins_but_empty_fields_keep_local_values():
    local = _project("p1", title="Local", brand_data={"brand_page": {"id": "x", "brand_name": "X"}}, client="Local client")
    remote = _project("p1", title="Remote", brand_data=None, client="")

    merged = merge_record(local, remote)

    assert merged.title == "Remote"
    assert merged.brand_data == {"brand_page": {"id": "x", "brand_name": "X"}}
    assert merged.client == "Local client"


def test_local_only_records_are_appended():
    merged = merge_collection([_project("local-1")], [_project("r1"), _project("r2")])

    assert [p.id for p in merged] == ["r1", "r2", "local-1"]


def test_ids_compare_by_string_form():
    merged = merge_collection([_project(42, title="Local")], [_project("42", title="Remote")])

    assert len(merged) == 1
    assert merged[0].title == "Remote"


def test_duplicate_remote_ids_appear_once():
    merged = merge_collection([], [_project("r1", title="A"), _project("r1", title="B")])

    assert [p.title for p in merged] == ["A"]


def test_seed_is_present_exactly_once():
    seed = demo_project()

    from_empty = merge_collection([], [], seed=seed)
    with_local_seed = merge_collection([seed, _project("p1")], [_project("p2")], seed=demo_project())
    with_remote_seed = merge_collection([], [_project(settings.DEMO_PROJECT_ID, title="Remote seed")], seed=seed)

    assert [p.id for p in from_empty] == [settings.DEMO_PROJECT_ID]
    assert sum(p.id == settings.DEMO_PROJECT_ID for p in with_local_seed) == 1
    assert [p.title for p in with_remote_seed] == ["Remote seed"]


def test_merge_is_idempotent():
    local = [_project("p1", title="Local", description="Kept"), _project("local-only")]
    remote = [_project("p1", title="Remote"), _project("p2")]

    once = merge_collection(local, remote, seed=demo_project())
    twice = merge_collection(once, once, seed=demo_project())

    assert [p.model_dump() for p in once] == [p.model_dump() for p in twice]


def test_seed_keeps_its_position_when_present():
    seed = demo_project()

    merged = merge_collection([_project("p1"), seed], [_project("p1")], seed=demo_project())
    fresh = merge_collection([_project("p1")], [_project("p1")], seed=seed)

    assert [p.id for p in merged] == ["p1", settings.DEMO_PROJECT_ID]
    assert [p.id for p in fresh] == [settings.DEMO_PROJECT_ID, "p1"]


def test_acknowledged_records_missing_remotely_are_dropped():
    local = [_project("p1"), _project("deleted-remotely"), _project("draft")]

    merged = merge_collection(local, [_project("p1")], acknowledged=["p1", "deleted-remotely"])

    assert [p.id for p in merged] == ["p1", "draft"]


def test_acknowledged_seed_is_never_dropped():
    seed = demo_project().model_copy(update={"title": "Edited showcase"})

    merged = merge_collection([seed], [], seed=demo_project(), acknowledged=[settings.DEMO_PROJECT_ID])

    assert [p.title for p in merged] == ["Edited showcase"]


def test_demo_project_carries_a_valid_brand_page():
    project = demo_project()

    assert project.is_page_published is True
    assert project.brand_data["brand_page"]["template"] == "editorial-luxury"
