"""
Proposal service with business logic.
"""

import uuid
from typing import Any, Dict, List, Optional
from sqlalchemy.ext.asyncio import AsyncSession

from agency.services.base_service import BaseService
from agency.db.repositories.proposal_repository import ProposalRepository
from agency.models.proposal import Proposal, ProposalStatus
from agency.schemas.common import normalize_id, EntityId
from agency.schemas.proposal import (
    ProposalCreate,
    ProposalUpdate,
    ProposalResponse,
    ProposalTotalsResponse,
)
from agency.utils.proposal_display import compute_proposal_totals, format_amount, sum_line_items
from agency.core.exceptions import ConflictError
from agency.core.logging import get_logger

logger = get_logger(__name__)


def _to_columns(data: Dict[str, Any]) -> Dict[str, Any]:
    if "account_id" in data:
        data["account_id"] = normalize_id(data["account_id"])
    if data.get("status") is not None:
        data["status"] = ProposalStatus(data["status"])
    return data


class ProposalService(BaseService):
    """Service for proposal operations."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.proposal_repo = ProposalRepository(session)

    def _to_response(self, proposal: Proposal) -> ProposalResponse:
        data = {column.name: getattr(proposal, column.name) for column in Proposal.__table__.columns}
        data["items"] = data.get("items") or []
        data["branding"] = data.get("branding") or {}
        return ProposalResponse.model_validate(data)

    async def create_proposal(self, proposal_data: ProposalCreate) -> ProposalResponse:
        """Create a proposal; total_amount is the sum of the line totals."""
        proposal_dict = _to_columns(proposal_data.model_dump(mode="json"))
        proposal_id = normalize_id(proposal_dict.pop("id", None)) or uuid.uuid4().hex

        if await self.proposal_repo.get(proposal_id):
            raise ConflictError(f"Proposal {proposal_id} already exists", details={"id": proposal_id})

        proposal = await self.proposal_repo.create(id=proposal_id, **proposal_dict)
        await self.session.commit()
        logger.info("Proposal created", extra={"proposal_id": proposal.id})
        return self._to_response(proposal)

    async def get_proposal(self, proposal_id: EntityId) -> Optional[ProposalResponse]:
        """Get proposal by ID."""
        proposal = await self.proposal_repo.get(proposal_id)
        if not proposal:
            return None
        return self._to_response(proposal)

    async def list_proposals(self) -> tuple[List[ProposalResponse], int]:
        """List proposals, newest first."""
        proposals = await self.proposal_repo.list_newest_first()
        return [self._to_response(p) for p in proposals], len(proposals)

    async def update_proposal(
        self,
        proposal_id: EntityId,
        proposal_data: ProposalUpdate,
    ) -> Optional[ProposalResponse]:
        """Update a proposal; new line items recompute the aggregate total."""
        proposal = await self.proposal_repo.get(proposal_id)
        if not proposal:
            return None

        update_dict = _to_columns(proposal_data.model_dump(mode="json", exclude_unset=True))
        if proposal_data.items:
            update_dict["total_amount"] = sum_line_items(proposal_data.items)

        updated = await self.proposal_repo.update(proposal.id, **update_dict)
        await self.session.commit()
        return self._to_response(updated)

    async def delete_proposal(self, proposal_id: EntityId) -> bool:
        """Delete a proposal."""
        deleted = await self.proposal_repo.delete(proposal_id)
        await self.session.commit()
        return deleted

    async def get_proposal_totals(self, proposal_id: EntityId) -> ProposalTotalsResponse:
        """Subtotal, tax and grand total as printed on the proposal."""
        proposal = self.require(await self.get_proposal(proposal_id), "Proposal")

        totals = compute_proposal_totals(proposal)
        return ProposalTotalsResponse(
            subtotal=totals.subtotal,
            tax_rate=totals.tax_rate,
            tax=totals.tax,
            grand_total=totals.grand_total,
            currency_symbol=totals.currency_symbol,
            formatted_subtotal=format_amount(totals.subtotal, totals.currency_symbol),
            formatted_tax=format_amount(totals.tax, totals.currency_symbol),
            formatted_grand_total=format_amount(totals.grand_total, totals.currency_symbol),
        )
