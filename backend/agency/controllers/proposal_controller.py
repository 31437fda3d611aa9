"""
Proposal controller.
"""

from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession

from agency.controllers.base_controller import BaseController
from agency.services.proposal_service import ProposalService
from agency.schemas.common import EntityId
from agency.schemas.proposal import (
    ProposalCreate,
    ProposalUpdate,
    ProposalResponse,
    ProposalListResponse,
    ProposalMutationResponse,
    ProposalTotalsResponse,
)


class ProposalController(BaseController):
    """Controller for proposal operations."""

    def __init__(self, session: AsyncSession):
        self.proposal_service = ProposalService(session)

    async def create_proposal(self, proposal_data: ProposalCreate) -> ProposalMutationResponse:
        """Create a new proposal."""
        proposal = await self.proposal_service.create_proposal(proposal_data)
        return ProposalMutationResponse(proposal=proposal)

    async def get_proposal(self, proposal_id: EntityId) -> Optional[ProposalResponse]:
        """Get proposal by ID."""
        return await self.proposal_service.get_proposal(proposal_id)

    async def list_proposals(self) -> ProposalListResponse:
        """List proposals."""
        proposals, total = await self.proposal_service.list_proposals()
        return ProposalListResponse(proposals=proposals, total=total)

    async def update_proposal(
        self,
        proposal_id: EntityId,
        proposal_data: ProposalUpdate,
    ) -> Optional[ProposalMutationResponse]:
        """Update a proposal."""
        proposal = await self.proposal_service.update_proposal(proposal_id, proposal_data)
        if not proposal:
            return None
        return ProposalMutationResponse(proposal=proposal)

    async def delete_proposal(self, proposal_id: EntityId) -> bool:
        """Delete a proposal."""
        return await self.proposal_service.delete_proposal(proposal_id)

    async def get_proposal_totals(self, proposal_id: EntityId) -> ProposalTotalsResponse:
        """Printed totals of a proposal."""
        return await self.proposal_service.get_proposal_totals(proposal_id)
