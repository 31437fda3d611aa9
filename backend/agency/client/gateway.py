"""
Remote persistence gateway: per-entity CRUD calls against the agency API.

Every failure leaves this module as a RemotePersistenceError: the HTTP status
for non-2xx answers, None for network errors and timeouts, and
SessionExpiredError for 401.
"""

import asyncio
from typing import Any, Dict, List, Optional, Type, TypeVar

import aiohttp
from pydantic import BaseModel, ValidationError

from agency.core.exceptions import RemotePersistenceError, SessionExpiredError
from agency.core.integrations.http.http_client import HttpClient, HttpStatusError
from agency.core.logging import get_logger
from agency.schemas.account import AccountResponse, BriefInfo, TransactionMutationResponse
from agency.schemas.common import EntityId, normalize_id
from agency.schemas.project import ProjectResponse, ProjectSyncReport
from agency.schemas.proposal import ProposalResponse

logger = get_logger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


def _error_message(payload: Any, default: str) -> str:
    """Pull the message out of an {"error": {"message": ...}} body."""
    if isinstance(payload, dict):
        error = payload.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
        if payload.get("detail"):
            return str(payload["detail"])
    return default


class RemotePersistenceGateway:
    """Thin translation of entity operations into API calls."""

    def __init__(self, http_client: HttpClient):
        self.http = http_client

    async def _call(self, method: str, endpoint: str, **kwargs: Any) -> Any:
        try:
            return await getattr(self.http, method)(endpoint, **kwargs)
        except HttpStatusError as e:
            if e.status == 401:
                logger.warning("Session rejected by remote store", extra={"endpoint": endpoint})
                raise SessionExpiredError(details=e.payload)
            message = _error_message(e.payload, f"Request failed with status {e.status}")
            logger.warning(
                "Remote store returned an error",
                extra={"endpoint": endpoint, "status": e.status, "error": message},
            )
            raise RemotePersistenceError(message, status_code=e.status, details=e.payload)
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.warning("Remote store unreachable", extra={"endpoint": endpoint, "error": repr(e)})
            raise RemotePersistenceError(f"Network error: {e!r}")

    @staticmethod
    def _parse(model: Type[ModelT], payload: Any) -> ModelT:
        try:
            return model.model_validate(payload)
        except ValidationError as e:
            raise RemotePersistenceError("Malformed response from remote store", details=str(e))

    def _parse_list(self, model: Type[ModelT], payload: Any, key: str) -> List[ModelT]:
        items = payload.get(key) if isinstance(payload, dict) else payload
        if not isinstance(items, list):
            raise RemotePersistenceError("Malformed response from remote store", details={"missing": key})
        return [self._parse(model, item) for item in items]

    @staticmethod
    def _entity(payload: Any, key: str) -> Any:
        """Mutation responses wrap the entity as {"success": true, key: {...}}."""
        if isinstance(payload, dict) and key in payload:
            return payload[key]
        return payload

    # Projects

    async def list_projects(self, include_content: bool = False) -> List[ProjectResponse]:
        params = {"include_content": "true"} if include_content else None
        payload = await self._call("get", "/projects", params=params)
        return self._parse_list(ProjectResponse, payload, "projects")

    async def create_project(self, project: Dict[str, Any]) -> ProjectResponse:
        payload = await self._call("post", "/projects", json=project)
        return self._parse(ProjectResponse, self._entity(payload, "project"))

    async def update_project(self, project_id: EntityId, changes: Dict[str, Any]) -> ProjectResponse:
        payload = await self._call("put", f"/projects/{normalize_id(project_id)}", json=changes)
        return self._parse(ProjectResponse, self._entity(payload, "project"))

    async def delete_project(self, project_id: EntityId) -> None:
        await self._call("delete", f"/projects/{normalize_id(project_id)}")

    async def sync_projects(self, records: List[Dict[str, Any]]) -> ProjectSyncReport:
        payload = await self._call("post", "/admin/sync-projects", json={"projects": records})
        return self._parse(ProjectSyncReport, payload)

    # Accounts

    async def list_accounts(self) -> List[AccountResponse]:
        payload = await self._call("get", "/accounts")
        return self._parse_list(AccountResponse, payload, "accounts")

    async def create_account(self, account: Dict[str, Any]) -> AccountResponse:
        payload = await self._call("post", "/accounts", json=account)
        return self._parse(AccountResponse, self._entity(payload, "account"))

    async def update_account(self, account_id: EntityId, changes: Dict[str, Any]) -> AccountResponse:
        payload = await self._call("put", f"/accounts/{normalize_id(account_id)}", json=changes)
        return self._parse(AccountResponse, self._entity(payload, "account"))

    async def delete_account(self, account_id: EntityId) -> None:
        await self._call("delete", f"/accounts/{normalize_id(account_id)}")

    async def approve_brief(self, account_id: EntityId) -> AccountResponse:
        payload = await self._call("post", f"/accounts/{normalize_id(account_id)}/brief/approve")
        return self._parse(AccountResponse, self._entity(payload, "account"))

    async def create_transaction(self, transaction: Dict[str, Any]) -> TransactionMutationResponse:
        payload = await self._call("post", "/transactions", json=transaction)
        return self._parse(TransactionMutationResponse, payload)

    # Proposals

    async def list_proposals(self) -> List[ProposalResponse]:
        payload = await self._call("get", "/proposals")
        return self._parse_list(ProposalResponse, payload, "proposals")

    async def create_proposal(self, proposal: Dict[str, Any]) -> ProposalResponse:
        payload = await self._call("post", "/proposals", json=proposal)
        return self._parse(ProposalResponse, self._entity(payload, "proposal"))

    async def update_proposal(self, proposal_id: EntityId, changes: Dict[str, Any]) -> ProposalResponse:
        payload = await self._call("put", f"/proposals/{normalize_id(proposal_id)}", json=changes)
        return self._parse(ProposalResponse, self._entity(payload, "proposal"))

    async def delete_proposal(self, proposal_id: EntityId) -> None:
        await self._call("delete", f"/proposals/{normalize_id(proposal_id)}")

    # Brief intake

    async def get_brief(self, token: str) -> BriefInfo:
        payload = await self._call("get", f"/brief/{token}")
        return self._parse(BriefInfo, payload)

    async def submit_brief(self, token: str, responses: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        return await self._call("post", f"/brief/{token}", json={"responses": responses})

    async def close(self) -> None:
        await self.http.close()
