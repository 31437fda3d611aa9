"""
AgencyState tests against an in-memory gateway.
"""

import asyncio

import pytest

from agency.core.config import settings
from agency.core.exceptions import InvalidInputError, RemotePersistenceError, SessionExpiredError
from agency.schemas.account import AccountResponse, BriefIntake
from agency.schemas.brand_page import BrandPage
from agency.schemas.project import ProjectResponse


def _seed_account(state, **fields):
    account = AccountResponse(id="a1", name="Ada", company="Northwind", **fields)
    state.store.load("accounts", [account])
    return account


@pytest.mark.asyncio
async def test_load_adds_showcase_project_and_caches(state, gateway):
    gateway.remote["projects"] = [ProjectResponse(id="p1", title="Remote")]

    await state.load()

    assert [p.id for p in state.projects] == ["p1", settings.DEMO_PROJECT_ID]
    cached = state.cache.read_collection("projects")
    assert [p["id"] for p in cached] == ["p1", settings.DEMO_PROJECT_ID]


@pytest.mark.asyncio
async def test_load_keeps_cached_heavy_fields(state, gateway, cache):
    brand_data = {"brand_page": {"id": "page", "brand_name": "Cached"}}
    cache.write_collection("projects", [
        ProjectResponse(id="p1", title="Cached", brand_data=brand_data).model_dump(mode="json"),
        {"id": "broken"},
    ])
    gateway.remote["projects"] = [ProjectResponse(id="p1", title="Remote")]

    await state.load()

    project = state.get_project("p1")
    assert project.title == "Remote"
    assert project.brand_data == brand_data
    assert state.get_project("broken") is None


@pytest.mark.asyncio
async def test_refresh_failure_keeps_local_state(state, gateway, cache):
    cache.write_collection("accounts", [AccountResponse(id="a1", name="Ada", company="N").model_dump(mode="json")])
    gateway.fail("list_accounts")

    await state.load()

    assert [a.id for a in state.accounts] == ["a1"]
    assert state.last_error is None


@pytest.mark.asyncio
async def test_session_expiry_clears_session_and_redirects(state, gateway, cache):
    redirected = []
    state.on_session_expired = lambda: redirected.append(True)
    cache.set("auth", "token")
    gateway.fail("list_projects", SessionExpiredError())

    await state.load()

    assert redirected == [True]
    assert cache.get("auth") is None
    assert state.session_expired is True


@pytest.mark.asyncio
async def test_add_project_is_visible_before_confirmation(state, gateway):
    gate = gateway.hold("create_project")

    task = state.add_project({"title": "Northwind Rebrand", "client": "Northwind"})

    project = state.projects[-1]
    assert project.title == "Northwind Rebrand"
    assert state.cache.read_collection("projects")[-1]["title"] == "Northwind Rebrand"

    gate.set()
    assert await task is True
    assert state.get_project(str(project.id)).client == "Northwind"


@pytest.mark.asyncio
async def test_failed_create_is_reverted_with_error(state, gateway):
    gateway.fail("create_project")

    task = state.add_project({"title": "Doomed"})
    assert await task is False

    assert all(p.title != "Doomed" for p in state.projects)
    assert state.last_error == "Failed to create project: Server error"


@pytest.mark.asyncio
async def test_update_of_pending_create_waits_for_it(state, gateway):
    gate = gateway.hold("create_project")
    state.add_project({"title": "Draft"})
    temp_id = state.projects[-1].id

    state.update_project(temp_id, {"title": "Renamed"})
    await asyncio.sleep(0)
    assert state.get_project(temp_id).title == "Renamed"
    assert [call[0] for call in gateway.calls] == ["create_project"]

    gate.set()
    await state.drain()

    assert [call[0] for call in gateway.calls] == ["create_project", "update_project"]
    assert gateway.calls[1][1:] == (str(temp_id), {"title": "Renamed"})
    assert state.get_project(temp_id).title == "Renamed"


@pytest.mark.asyncio
async def test_failed_update_reverts_only_its_fields(state, gateway):
    state.store.load("projects", [ProjectResponse(id="p1", title="Original", progress=10)])
    gateway.fail("update_project")

    task = state.update_project("p1", {"title": "Changed"})
    state.store.patch("projects", "p1", {"progress": 60})
    await task

    project = state.get_project("p1")
    assert project.title == "Original"
    assert project.progress == 60
    assert state.last_error.startswith("Failed to update project")


@pytest.mark.asyncio
async def test_project_helpers(state, gateway):
    state.store.load("projects", [ProjectResponse(
        id="p1",
        title="Site",
        tasks=[{"id": 1, "title": "Wireframes"}, {"id": 2, "title": "Copy"}],
    )])

    state.change_project_status("p1", "Review")
    state.delete_task("p1", "1")
    state.link_project_to_account("p1", 7)
    state.link_project_to_brief("p1", "brief-token-123")
    await state.drain()

    project = state.get_project("p1")
    assert project.status.value == "Review"
    assert [t.title for t in project.tasks] == ["Copy"]
    assert project.linked_account_id == 7
    assert project.linked_brief_token == "brief-token-123"

    with pytest.raises(InvalidInputError):
        state.change_project_status("p1", "Sleeping")


@pytest.mark.asyncio
async def test_showcase_project_cannot_be_deleted(state):
    await state.load(refresh=False)

    with pytest.raises(InvalidInputError):
        state.delete_project(settings.DEMO_PROJECT_ID)


@pytest.mark.asyncio
async def test_showcase_edits_stay_local(state, gateway):
    await state.load(refresh=False)

    task = state.update_project(settings.DEMO_PROJECT_ID, {"title": "My showcase"})

    assert task is None
    assert gateway.calls == []
    assert state.get_project(settings.DEMO_PROJECT_ID).title == "My showcase"


@pytest.mark.asyncio
async def test_project_assets(state):
    state.store.load("projects", [ProjectResponse(id="p1", title="Site")])

    state.upload_logo("p1", "primary", "/uploads/logo.svg")
    state.upload_font("p1", {"id": "f1", "name": "Brand Sans", "family": "Brand Sans", "data": "data:font/woff2;base64,AAAA"})
    state.set_global_font("p1", "f1")
    await state.drain()

    assets = state.get_project("p1").project_assets
    assert assets.logos == {"primary": "/uploads/logo.svg"}
    assert assets.selected_font_id == "f1"

    state.delete_font("p1", "f1")
    state.delete_logo("p1", "primary")
    await state.drain()

    assets = state.get_project("p1").project_assets
    assert assets.fonts == []
    assert assets.selected_font_id is None
    assert assets.logos == {}


@pytest.mark.asyncio
@pytest.mark.parametrize("url", ["https://elsewhere.test/a.woff2", "javascript:alert(1)", "//cdn.test/a.woff2"])
async def test_foreign_font_urls_are_rejected(state, url):
    state.store.load("projects", [ProjectResponse(id="p1", title="Site")])

    with pytest.raises(InvalidInputError):
        state.upload_font("p1", {"id": "f1", "name": "X", "family": "X", "data": url})

    assert state.get_project("p1").project_assets is None


@pytest.mark.asyncio
async def test_same_origin_font_url_is_accepted(state):
    state.store.load("projects", [ProjectResponse(id="p1", title="Site")])

    state.upload_font("p1", {"id": "f1", "name": "X", "family": "X", "data": "https://studio.test/fonts/x.woff2"})
    await state.drain()

    assert state.get_project("p1").project_assets.fonts[0].id == "f1"


@pytest.mark.asyncio
async def test_publish_brand_page(state, gateway):
    state.store.load("projects", [ProjectResponse(id="p1", title="Site")])
    page = BrandPage(id="page-1", brand_name="Northwind")

    await state.publish_brand_page("p1", page)

    project = state.get_project("p1")
    assert project.is_page_published is True
    assert project.linked_brand_page_id == "page-1"
    assert BrandPage.from_brand_data(project.brand_data).status.value == "published"
    changes = gateway.calls[-1][2]
    assert changes["is_page_published"] is True


@pytest.mark.asyncio
async def test_sync_all_projects_skips_showcase(state, gateway):
    await state.load(refresh=False)
    state.store.insert("projects", ProjectResponse(id="p1", title="Site"))

    report = await state.sync_all_projects()

    records = gateway.calls[-1][1]
    assert [r["id"] for r in records] == ["p1"]
    assert report.synced == 1


@pytest.mark.asyncio
async def test_sync_all_projects_failure_sets_error(state, gateway):
    state.store.load("projects", [ProjectResponse(id="p1", title="Site")])
    gateway.fail("sync_projects")

    assert await state.sync_all_projects() is None
    assert state.last_error == "Failed to sync projects: Server error"


@pytest.mark.asyncio
async def test_add_account_replaces_placeholder(state, gateway):
    task = state.add_account({
        "name": "Ada",
        "company": "Northwind",
        "email": "ADA@northwind.test",
        "password": "Studio2024!x",
        "brief_form_type": "logo",
    })
    temp_id = state.accounts[-1].id
    assert state.accounts[-1].brief.status.value == "pending"

    await task

    account = state.get_account(temp_id)
    assert account.id == "acc-1"
    assert account.email == "ada@northwind.test"
    assert gateway.calls[0][1]["password"] == "Studio2024!x"
    assert "password" not in state.cache.read_collection("accounts")[0]


@pytest.mark.asyncio
async def test_weak_password_is_rejected_locally(state, gateway):
    with pytest.raises(InvalidInputError) as exc:
        state.add_account({"name": "Ada", "company": "N", "email": "ada@n.test", "password": "abc"})

    assert exc.value.details["errors"]
    assert state.accounts == ()
    assert gateway.calls == []


@pytest.mark.asyncio
async def test_ledger_fields_are_not_directly_editable(state):
    _seed_account(state)

    with pytest.raises(InvalidInputError):
        state.update_account("a1", {"balance": 0})


@pytest.mark.asyncio
async def test_transactions_update_totals_together(state, gateway):
    _seed_account(state)

    state.add_transaction("a1", "Debt", 1000, "Logo design")
    state.add_transaction("a1", "Payment", 400)

    account = state.get_account("a1")
    assert (account.total_debt, account.total_paid, account.balance) == (1000.0, 400.0, 600.0)
    assert len(account.transactions) == 2

    await state.drain()
    account = state.get_account("a1")
    assert [t.id for t in account.transactions] == ["txn-1", "txn-2"]
    assert account.balance == 600.0


@pytest.mark.asyncio
async def test_sub_cent_amounts_keep_balance_equal_to_stored_amounts(state, gateway):
    _seed_account(state)

    for _ in range(3):
        state.add_transaction("a1", "Debt", 0.333)
    state.add_transaction("a1", "Payment", 0.005)

    account = state.get_account("a1")
    amounts = [t.amount for t in account.transactions]
    assert amounts[:3] == [0.33, 0.33, 0.33]
    debts = sum(amounts[:3])
    assert account.total_debt == pytest.approx(debts, abs=1e-9)
    assert account.balance == pytest.approx(debts - amounts[3], abs=1e-9)
    await state.drain()
    assert all(call[1]["amount"] in (0.33, amounts[3]) for call in gateway.calls)


@pytest.mark.asyncio
@pytest.mark.parametrize("amount", [0, -10, float("nan"), "abc"])
async def test_invalid_amount_changes_nothing(state, gateway, amount):
    _seed_account(state)

    with pytest.raises(InvalidInputError):
        state.add_transaction("a1", "Debt", amount)

    account = state.get_account("a1")
    assert account.balance == 0.0
    assert account.transactions == []
    assert gateway.calls == []


@pytest.mark.asyncio
async def test_failed_transaction_is_backed_out_alone(state, gateway):
    _seed_account(state)
    attempts = []
    original = gateway.create_transaction

    async def flaky(transaction):
        attempts.append(transaction)
        if len(attempts) == 1:
            raise RemotePersistenceError("Server error", status_code=500)
        return await original(transaction)

    gateway.create_transaction = flaky

    state.add_transaction("a1", "Debt", 1000)
    state.add_transaction("a1", "Payment", 400)
    await state.drain()

    account = state.get_account("a1")
    assert (account.total_debt, account.total_paid, account.balance) == (0.0, 400.0, -400.0)
    assert [t.type.value for t in account.transactions] == ["Payment"]
    assert state.last_error == "Failed to record transaction: Server error"


@pytest.mark.asyncio
async def test_approve_brief(state, gateway):
    _seed_account(state, brief=BriefIntake(form_type="logo", status="submitted"))

    await state.approve_brief("a1")

    assert state.get_account("a1").brief.status.value == "approved"


@pytest.mark.asyncio
async def test_approve_brief_requires_submission(state):
    _seed_account(state, brief=BriefIntake(form_type="logo", status="pending"))

    with pytest.raises(InvalidInputError):
        state.approve_brief("a1")


@pytest.mark.asyncio
async def test_proposal_items_drive_total(state, gateway):
    await state.add_proposal({"id": "prop-1", "title": "Package"})

    state.update_proposal("prop-1", {"items": [{"id": 1, "quantity": 3, "unit_price": 100}]})
    await state.drain()

    assert state.get_proposal("prop-1").total_amount == 300.0
    assert gateway.calls[-1][2]["total_amount"] == 300.0


@pytest.mark.asyncio
async def test_local_only_records_never_reach_the_gateway(state, gateway):
    assert state.add_expense({"title": "Fonts", "amount": 49, "category": "Software", "date": "2024-05-01"}) is None
    state.add_message({"id": "m1", "sender": "Ada", "subject": "Hello", "date": "2024-05-01"})
    state.mark_message_read("m1")
    state.add_team_member({"id": "t1", "name": "Grace", "role": "Designer"})
    state.remove_team_member("t1")

    assert gateway.calls == []
    assert state.messages[0].read is True
    assert state.team_members == ()
    assert state.cache.read_collection("expenses")[0]["title"] == "Fonts"


@pytest.mark.asyncio
async def test_subscribers_see_changes(state):
    seen = []
    state.subscribe(seen.append)

    state.add_expense({"title": "Rent", "amount": 500, "date": "2024-05-01"})

    assert seen == ["expenses"]


@pytest.mark.asyncio
async def test_update_after_retried_create_reaches_remote(state, gateway):
    gateway.fail("create_project")
    assert await state.add_project({"id": 42, "title": "Studio"}) is False

    gateway.failures.clear()
    state.clear_error()
    assert await state.add_project({"id": 42, "title": "Studio"}) is True

    assert await state.update_project("42", {"title": "Renamed"}) is True
    assert gateway.calls[-1] == ("update_project", "42", {"title": "Renamed"})
    assert state.last_error is None
    assert state.get_project(42).title == "Renamed"


@pytest.mark.asyncio
async def test_settled_creates_leave_no_bookkeeping(state, gateway):
    for index in range(50):
        state.add_project({"title": f"Project {index}"})
    await state.drain()

    assert len(state.projects) == 50
    assert state.store.pending_count() == 0
    assert state.sync._locks == {}


@pytest.mark.asyncio
async def test_server_id_still_reachable_by_temp_id_until_reload(state, gateway):
    task = state.add_account({
        "name": "Ada",
        "company": "Northwind",
        "email": "ada@northwind.test",
        "password": "Studio2024!x",
    })
    temp_id = state.accounts[-1].id
    await task

    assert state.store.pending_count() == 0
    await state.update_account(temp_id, {"company": "Contoso"})
    assert gateway.calls[-1] == ("update_account", "acc-1", {"company": "Contoso"})

    state.store.load("accounts", [])
    assert state.store.resolve_id("accounts", temp_id) == str(temp_id)


@pytest.mark.asyncio
async def test_record_deleted_remotely_disappears_on_refresh(state, gateway):
    gateway.remote["projects"] = [ProjectResponse(id="p1", title="One"), ProjectResponse(id="p2", title="Two")]
    await state.load()

    gateway.remote["projects"] = [ProjectResponse(id="p1", title="One")]
    await state.refresh()

    assert state.get_project("p2") is None
    assert [p.id for p in state.projects] == ["p1", settings.DEMO_PROJECT_ID]


@pytest.mark.asyncio
async def test_refresh_keeps_unconfirmed_create(state, gateway):
    await state.load()
    gate = gateway.hold("create_project")
    state.add_project({"id": "draft", "title": "Draft"})

    await state.refresh()

    assert state.get_project("draft").title == "Draft"
    gate.set()
    await state.drain()
