"""
Application state service.

AgencyState is the single object UI surfaces receive: selectors read the
entity store, commands mutate it through the synchronization protocol.
Every command applies locally before it returns; the remote call runs in
the returned task.
"""

import asyncio
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Dict, List, Optional, Tuple

from pydantic import BaseModel, ValidationError

from agency.brand_pages.sanitize import is_safe_font_url
from agency.client.cache import LocalCache
from agency.client.gateway import RemotePersistenceGateway
from agency.client.reconcile import merge_collection
from agency.client.seed import demo_project
from agency.client.store import COLLECTIONS, EntityStore, Revert
from agency.client.sync import OptimisticCommand, SyncProtocol
from agency.core.exceptions import (
    InvalidInputError,
    NotFoundError,
    RemotePersistenceError,
    SessionExpiredError,
)
from agency.core.logging import get_logger
from agency.core.security import validate_password
from agency.models.account import BriefStatus
from agency.models.project import ProjectStatus
from agency.models.transaction import TransactionType
from agency.schemas.account import BriefIntake, TransactionMutationResponse, TransactionResponse
from agency.schemas.brand_page import BrandPage, BrandPageStatus
from agency.schemas.common import EntityId, normalize_id, same_id
from agency.schemas.project import ProjectAssets, ProjectFont, ProjectSyncReport
from agency.schemas.proposal import ProposalItem
from agency.utils.ledger import LedgerTotals, apply_transaction, check_amount
from agency.utils.proposal_display import sum_line_items

logger = get_logger(__name__)

Task = Optional["asyncio.Task[bool]"]

LOGO_SLOTS = ("primary", "secondary", "icon")
LEDGER_FIELDS = ("total_debt", "total_paid", "balance", "transactions")
ACCOUNT_WRITABLE_FIELDS = ("name", "company", "email", "username", "status")


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _is_demo(entity_id: EntityId) -> bool:
    return normalize_id(entity_id).startswith("demo-")


class AgencyState:
    """Selectors and commands over projects, accounts, proposals and local records."""

    def __init__(
        self,
        store: EntityStore,
        cache: LocalCache,
        gateway: RemotePersistenceGateway,
        sync: SyncProtocol,
        on_session_expired: Optional[Callable[[], None]] = None,
    ):
        """
        Args:
            store: Entity store shared by every surface
            cache: Durable local cache
            gateway: Remote persistence gateway
            sync: Synchronization protocol bound to the same store and cache
            on_session_expired: Called after session keys are cleared (e.g. redirect to login)
        """
        self.store = store
        self.cache = cache
        self.gateway = gateway
        self.sync = sync
        self.on_session_expired = on_session_expired
        self.session_expired = False
        self.sync.on_session_expired = self._handle_session_expired

    # Selectors

    @property
    def projects(self) -> Tuple[BaseModel, ...]:
        return self.store.all("projects")

    @property
    def accounts(self) -> Tuple[BaseModel, ...]:
        return self.store.all("accounts")

    @property
    def proposals(self) -> Tuple[BaseModel, ...]:
        return self.store.all("proposals")

    @property
    def expenses(self) -> Tuple[BaseModel, ...]:
        return self.store.all("expenses")

    @property
    def messages(self) -> Tuple[BaseModel, ...]:
        return self.store.all("messages")

    @property
    def team_members(self) -> Tuple[BaseModel, ...]:
        return self.store.all("team_members")

    def get_project(self, project_id: EntityId) -> Optional[BaseModel]:
        return self.store.get("projects", project_id)

    def get_account(self, account_id: EntityId) -> Optional[BaseModel]:
        return self.store.get("accounts", account_id)

    def get_proposal(self, proposal_id: EntityId) -> Optional[BaseModel]:
        return self.store.get("proposals", proposal_id)

    @property
    def last_error(self) -> Optional[str]:
        return self.sync.last_error

    def clear_error(self) -> None:
        self.sync.clear_error()

    def subscribe(self, listener: Callable[[str], None]) -> Callable[[], None]:
        return self.store.subscribe(listener)

    async def drain(self) -> None:
        await self.sync.drain()

    # Loading

    def _parse_cached(self, collection: str, items: Any) -> List[BaseModel]:
        records = []
        for item in items if isinstance(items, list) else []:
            try:
                records.append(COLLECTIONS[collection].model_validate(item))
            except ValidationError as e:
                logger.warning(
                    "Dropping unreadable cached record",
                    extra={"collection": collection, "error": str(e)},
                )
        return records

    async def load(self, refresh: bool = True) -> None:
        """Restore every collection from the local cache, then refetch from the remote store."""
        snapshot = self.cache.read_snapshot()
        for collection in COLLECTIONS:
            records = self._parse_cached(collection, snapshot.get(collection))
            if collection == "projects":
                records = merge_collection([], records, seed=demo_project())
            self.store.load(collection, records)
        if refresh:
            await self.refresh()

    async def refresh(self) -> None:
        """Fetch projects, accounts and proposals concurrently and reconcile each."""
        await asyncio.gather(
            self._refresh("projects", self.gateway.list_projects, seed=demo_project()),
            self._refresh("accounts", self.gateway.list_accounts),
            self._refresh("proposals", self.gateway.list_proposals),
        )

    async def _refresh(
        self,
        collection: str,
        fetch: Callable[[], Awaitable[List[BaseModel]]],
        seed: Optional[BaseModel] = None,
    ) -> bool:
        # Ids confirmed while the fetch is in flight may be missing from it
        acknowledged = self.store.acknowledged(collection)
        try:
            remote = await fetch()
        except SessionExpiredError:
            self._handle_session_expired()
            return False
        except RemotePersistenceError as e:
            logger.warning(
                "Refetch failed, keeping local state",
                extra={"collection": collection, "status_code": e.status_code, "error": e.message},
            )
            return False

        merged = merge_collection(self.store.all(collection), remote, seed=seed, acknowledged=acknowledged)
        self.store.load(collection, merged)
        self.store.acknowledge(collection, [record.id for record in remote], replace=True)
        self.sync.write_cache(collection)
        return True

    def _handle_session_expired(self) -> None:
        if self.session_expired:
            return
        self.session_expired = True
        self.cache.clear_session()
        logger.warning("Session expired, session keys cleared")
        if self.on_session_expired:
            self.on_session_expired()

    # Generic command builders

    def _create(
        self,
        collection: str,
        record: BaseModel,
        persist: Optional[Callable[[Dict[str, Any]], Awaitable[BaseModel]]],
        payload: Optional[Dict[str, Any]] = None,
        failure_message: str = "Failed to create record",
    ) -> Task:
        def apply() -> Revert:
            revert = self.store.insert(collection, record)
            if persist is not None:
                self.store.track_pending(collection, record)
            return revert

        if payload is None:
            payload = record.model_dump(mode="json", exclude={"created_at", "updated_at"})

        return self.sync.execute(OptimisticCommand(
            collection=collection,
            entity_id=record.id,
            apply=apply,
            persist=(lambda: persist(payload)) if persist else None,
            confirm=(lambda canonical: self.store.confirm_create(collection, record.id, canonical)) if persist else None,
            failure_message=failure_message,
            is_create=True,
        ))

    def _update(
        self,
        collection: str,
        entity_id: EntityId,
        changes: Dict[str, Any],
        persist: Optional[Callable[[str, Dict[str, Any]], Awaitable[Any]]],
        failure_message: str = "Failed to save changes",
        payload_builder: Optional[Callable[[BaseModel], Dict[str, Any]]] = None,
    ) -> Task:
        payload: Dict[str, Any] = {}

        def apply() -> Revert:
            revert = self.store.patch(collection, entity_id, changes)
            updated = self.store.get(collection, entity_id)
            if payload_builder:
                payload.update(payload_builder(updated))
            else:
                payload.update(updated.model_dump(mode="json", include=set(changes)))
            return revert

        remote = persist if persist and not _is_demo(entity_id) else None
        return self.sync.execute(OptimisticCommand(
            collection=collection,
            entity_id=entity_id,
            apply=apply,
            persist=(lambda: remote(self.store.resolve_id(collection, entity_id), payload)) if remote else None,
            failure_message=failure_message,
        ))

    def _delete(
        self,
        collection: str,
        entity_id: EntityId,
        persist: Optional[Callable[[str], Awaitable[Any]]],
        failure_message: str = "Failed to delete record",
    ) -> Task:
        return self.sync.execute(OptimisticCommand(
            collection=collection,
            entity_id=entity_id,
            apply=lambda: self.store.remove(collection, entity_id),
            persist=(lambda: persist(self.store.resolve_id(collection, entity_id))) if persist else None,
            failure_message=failure_message,
        ))

    def _require(self, collection: str, entity_id: EntityId) -> BaseModel:
        record = self.store.get(collection, entity_id)
        if record is None:
            raise NotFoundError(f"No {collection} record with id {normalize_id(entity_id)}")
        return record

    # Projects

    def add_project(self, data: Dict[str, Any]) -> Task:
        """Create a project; the client-assigned id is kept by the remote store."""
        data = dict(data)
        data.setdefault("id", self.store.new_temp_id())
        record = self.store.build("projects", data)
        return self._create("projects", record, self.gateway.create_project,
                            failure_message="Failed to create project")

    def update_project(self, project_id: EntityId, changes: Dict[str, Any]) -> Task:
        return self._update("projects", project_id, changes, self.gateway.update_project,
                            failure_message="Failed to update project")

    def delete_project(self, project_id: EntityId) -> Task:
        if _is_demo(project_id):
            raise InvalidInputError("The showcase project cannot be deleted")
        return self._delete("projects", project_id, self.gateway.delete_project,
                            failure_message="Failed to delete project")

    def change_project_status(self, project_id: EntityId, status: str) -> Task:
        try:
            status = ProjectStatus(status)
        except ValueError:
            raise InvalidInputError(f"Unknown project status: {status}")
        return self.update_project(project_id, {"status": status})

    def delete_task(self, project_id: EntityId, task_id: EntityId) -> Task:
        project = self._require("projects", project_id)
        tasks = [task for task in project.tasks if not same_id(task.id, task_id)]
        if len(tasks) == len(project.tasks):
            raise NotFoundError(f"No task with id {normalize_id(task_id)}")
        return self.update_project(project_id, {"tasks": tasks})

    def link_project_to_account(self, project_id: EntityId, account_id: Optional[EntityId]) -> Task:
        return self.update_project(project_id, {"linked_account_id": account_id})

    def link_project_to_proposal(self, project_id: EntityId, proposal_id: Optional[EntityId]) -> Task:
        return self.update_project(project_id, {"linked_proposal_id": proposal_id})

    def link_project_to_brief(self, project_id: EntityId, brief_token: Optional[str]) -> Task:
        return self.update_project(project_id, {"linked_brief_token": brief_token})

    def link_project_to_brand_page(self, project_id: EntityId, brand_page_id: Optional[str]) -> Task:
        return self.update_project(project_id, {"linked_brand_page_id": brand_page_id})

    def _assets(self, project_id: EntityId) -> ProjectAssets:
        project = self._require("projects", project_id)
        return project.project_assets or ProjectAssets()

    def upload_logo(self, project_id: EntityId, slot: str, url: str) -> Task:
        """Attach an already uploaded logo file to one of the logo slots."""
        if slot not in LOGO_SLOTS:
            raise InvalidInputError(f"Unknown logo slot: {slot}")
        if not url:
            raise InvalidInputError("Logo URL is required")
        assets = self._assets(project_id)
        assets = assets.model_copy(update={"logos": {**assets.logos, slot: url}})
        return self.update_project(project_id, {"project_assets": assets})

    def delete_logo(self, project_id: EntityId, slot: str) -> Task:
        assets = self._assets(project_id)
        if slot not in assets.logos:
            raise NotFoundError(f"No logo in slot {slot}")
        logos = {key: value for key, value in assets.logos.items() if key != slot}
        return self.update_project(project_id, {"project_assets": assets.model_copy(update={"logos": logos})})

    def upload_font(self, project_id: EntityId, font: Dict[str, Any]) -> Task:
        """Attach a font file; only data:, blob: and same-origin URLs are accepted."""
        try:
            font = ProjectFont.model_validate(font)
        except ValidationError as e:
            raise InvalidInputError("Invalid font", details=e.errors(include_url=False))
        if not is_safe_font_url(font.data):
            raise InvalidInputError("Font file URL must be same-origin, data: or blob:")
        assets = self._assets(project_id)
        fonts = [f for f in assets.fonts if f.id != font.id] + [font]
        return self.update_project(project_id, {"project_assets": assets.model_copy(update={"fonts": fonts})})

    def delete_font(self, project_id: EntityId, font_id: str) -> Task:
        assets = self._assets(project_id)
        fonts = [f for f in assets.fonts if f.id != font_id]
        if len(fonts) == len(assets.fonts):
            raise NotFoundError(f"No font with id {font_id}")
        selected = None if assets.selected_font_id == font_id else assets.selected_font_id
        return self.update_project(project_id, {
            "project_assets": assets.model_copy(update={"fonts": fonts, "selected_font_id": selected}),
        })

    def set_global_font(self, project_id: EntityId, font_id: Optional[str]) -> Task:
        assets = self._assets(project_id)
        if font_id is not None and not any(f.id == font_id for f in assets.fonts):
            raise NotFoundError(f"No font with id {font_id}")
        return self.update_project(project_id, {
            "project_assets": assets.model_copy(update={"selected_font_id": font_id}),
        })

    async def sync_all_projects(self) -> Optional[ProjectSyncReport]:
        """Push every non-demo local project through the bulk sync endpoint."""
        records = [
            p.model_dump(mode="json", exclude={"created_at", "updated_at"})
            for p in self.projects
            if not _is_demo(p.id)
        ]
        if not records:
            return None
        try:
            report = await self.gateway.sync_projects(records)
        except SessionExpiredError:
            self.sync.last_error = "Failed to sync projects: Session expired"
            self._handle_session_expired()
            return None
        except RemotePersistenceError as e:
            self.sync.last_error = f"Failed to sync projects: {e.message}"
            return None
        logger.info(
            "Projects synced",
            extra={"synced": report.synced, "skipped": report.skipped, "failed": report.failed},
        )
        return report

    # Brand pages

    def save_brand_page(self, project_id: EntityId, page: BrandPage) -> Task:
        """Persist a brand page into its project's brand data."""
        return self.update_project(project_id, {
            "brand_data": page.to_brand_data(),
            "linked_brand_page_id": page.id,
        })

    def publish_brand_page(self, project_id: EntityId, page: BrandPage) -> Task:
        """Save a brand page as published and make the project page public."""
        page = page.model_copy(update={"status": BrandPageStatus.PUBLISHED})
        return self.update_project(project_id, {
            "brand_data": page.to_brand_data(),
            "linked_brand_page_id": page.id,
            "is_page_published": True,
        })

    # Accounts

    def add_account(self, data: Dict[str, Any]) -> Task:
        """
        Create a client account.

        The password is validated here and sent to the remote store; it is
        never kept in the entity store. The placeholder carries a temporary
        id until the remote store assigns the real one.
        """
        data = dict(data)
        password = data.pop("password", None) or ""
        email = (data.get("email") or "").strip().lower()
        for required in ("name", "company"):
            if not data.get(required):
                raise InvalidInputError(f"{required} is required")
        if not email:
            raise InvalidInputError("email is required")
        check = validate_password(password, email)
        if not check.valid:
            raise InvalidInputError(
                "Password does not meet requirements",
                details={"errors": check.errors, "suggestions": check.suggestions},
            )

        form_type = data.pop("brief_form_type", None)
        if form_type == "none":
            form_type = None
        record = self.store.build("accounts", {
            **data,
            "id": self.store.new_temp_id(),
            "email": email,
            "brief": BriefIntake(
                form_type=form_type,
                status=BriefStatus.PENDING if form_type else BriefStatus.NONE,
            ),
            "created_at": _now(),
        })
        payload = {
            "name": record.name,
            "company": record.company,
            "email": email,
            "password": password,
            "username": record.username,
            "brief_form_type": form_type,
        }
        return self._create("accounts", record, self.gateway.create_account, payload,
                            failure_message="Failed to create account")

    @staticmethod
    def _account_payload(account: BaseModel, changes: Dict[str, Any]) -> Dict[str, Any]:
        payload = account.model_dump(mode="json", include=set(changes) & set(ACCOUNT_WRITABLE_FIELDS))
        if "brief" in changes:
            payload["brief_form_type"] = account.brief.form_type
            payload["brief_status"] = account.brief.status.value
            payload["brief_responses"] = account.brief.responses
        return payload

    def update_account(self, account_id: EntityId, changes: Dict[str, Any]) -> Task:
        """Update contact, status or brief fields. Ledger fields change only through transactions."""
        blocked = set(changes) & set(LEDGER_FIELDS)
        if blocked:
            raise InvalidInputError(f"Ledger fields cannot be edited: {sorted(blocked)}")
        if "email" in changes and changes["email"]:
            changes = {**changes, "email": changes["email"].strip().lower()}
        return self._update("accounts", account_id, changes, self.gateway.update_account,
                            failure_message="Failed to update account",
                            payload_builder=lambda account: self._account_payload(account, changes))

    def delete_account(self, account_id: EntityId) -> Task:
        return self._delete("accounts", account_id, self.gateway.delete_account,
                            failure_message="Failed to delete account")

    def add_transaction(
        self,
        account_id: EntityId,
        kind: str,
        amount: float,
        description: str = "",
        date: Optional[datetime] = None,
    ) -> Task:
        """
        Append a Debt or Payment to an account.

        The running totals and the balance change together; the amount must
        be a positive finite number or nothing changes.
        """
        try:
            amount = check_amount(amount)
            kind = TransactionType(kind)
        except ValueError as e:
            raise InvalidInputError(str(e))
        account = self._require("accounts", account_id)

        transaction = TransactionResponse(
            id=self.store.new_temp_id(),
            account_id=account.id,
            type=kind,
            amount=amount,
            description=description,
            date=date or _now(),
        )

        def apply() -> Revert:
            current = self._require("accounts", account_id)
            totals = apply_transaction(LedgerTotals(current.total_debt, current.total_paid), kind, amount)
            self.store.patch("accounts", account_id, {
                "total_debt": totals.total_debt,
                "total_paid": totals.total_paid,
                "balance": totals.balance,
                "transactions": [*current.transactions, transaction],
            })
            return Revert(lambda: self._undo_transaction(account_id, transaction))

        def confirm(result: TransactionMutationResponse) -> None:
            current = self.store.get("accounts", account_id)
            if current is None:
                return
            transactions = [
                result.transaction if same_id(t.id, transaction.id) else t
                for t in current.transactions
            ]
            self.store.patch("accounts", account_id, {"transactions": transactions})

        def persist() -> Awaitable[TransactionMutationResponse]:
            return self.gateway.create_transaction({
                "account_id": self.store.resolve_id("accounts", account_id),
                "type": kind.value,
                "amount": amount,
                "description": description,
                "date": transaction.date.isoformat(),
            })

        return self.sync.execute(OptimisticCommand(
            collection="accounts",
            entity_id=account_id,
            apply=apply,
            persist=persist,
            confirm=confirm,
            failure_message="Failed to record transaction",
        ))

    def _undo_transaction(self, account_id: EntityId, transaction: TransactionResponse) -> None:
        """Take one transaction back out of the ledger, leaving later ones in place."""
        current = self.store.get("accounts", account_id)
        if current is None or not any(same_id(t.id, transaction.id) for t in current.transactions):
            return
        if transaction.type == TransactionType.DEBT:
            totals = LedgerTotals(round(current.total_debt - transaction.amount, 2), current.total_paid)
        else:
            totals = LedgerTotals(current.total_debt, round(current.total_paid - transaction.amount, 2))
        self.store.patch("accounts", account_id, {
            "total_debt": totals.total_debt,
            "total_paid": totals.total_paid,
            "balance": totals.balance,
            "transactions": [t for t in current.transactions if not same_id(t.id, transaction.id)],
        })

    def approve_brief(self, account_id: EntityId) -> Task:
        account = self._require("accounts", account_id)
        if account.brief.status != BriefStatus.SUBMITTED:
            raise InvalidInputError("Only submitted briefs can be approved")
        brief = account.brief.model_copy(update={"status": BriefStatus.APPROVED, "approved_at": _now()})

        def confirm(canonical: BaseModel) -> None:
            if self.store.get("accounts", account_id) is not None:
                self.store.patch("accounts", account_id, {"brief": canonical.brief})

        return self.sync.execute(OptimisticCommand(
            collection="accounts",
            entity_id=account_id,
            apply=lambda: self.store.patch("accounts", account_id, {"brief": brief}),
            persist=lambda: self.gateway.approve_brief(self.store.resolve_id("accounts", account_id)),
            confirm=confirm,
            failure_message="Failed to approve brief",
        ))

    # Proposals

    def add_proposal(self, data: Dict[str, Any]) -> Task:
        data = dict(data)
        data.setdefault("id", self.store.new_temp_id())
        record = self.store.build("proposals", data)
        return self._create("proposals", record, self.gateway.create_proposal,
                            failure_message="Failed to create proposal")

    def update_proposal(self, proposal_id: EntityId, changes: Dict[str, Any]) -> Task:
        if changes.get("items") is not None:
            try:
                items = [ProposalItem.model_validate(item) for item in changes["items"]]
            except ValidationError as e:
                raise InvalidInputError("Invalid line items", details=e.errors(include_url=False))
            changes = {**changes, "items": items, "total_amount": sum_line_items(items)}
        return self._update("proposals", proposal_id, changes, self.gateway.update_proposal,
                            failure_message="Failed to update proposal")

    def delete_proposal(self, proposal_id: EntityId) -> Task:
        return self._delete("proposals", proposal_id, self.gateway.delete_proposal,
                            failure_message="Failed to delete proposal")

    # Local-only records

    def _add_local(self, collection: str, data: Dict[str, Any]) -> Task:
        data = dict(data)
        data.setdefault("id", self.store.new_temp_id())
        record = self.store.build(collection, data)
        return self._create(collection, record, None)

    def add_expense(self, data: Dict[str, Any]) -> Task:
        return self._add_local("expenses", data)

    def remove_expense(self, expense_id: EntityId) -> Task:
        return self._delete("expenses", expense_id, None)

    def add_message(self, data: Dict[str, Any]) -> Task:
        return self._add_local("messages", data)

    def mark_message_read(self, message_id: EntityId) -> Task:
        return self._update("messages", message_id, {"read": True}, None)

    def add_team_member(self, data: Dict[str, Any]) -> Task:
        return self._add_local("team_members", data)

    def remove_team_member(self, member_id: EntityId) -> Task:
        return self._delete("team_members", member_id, None)
