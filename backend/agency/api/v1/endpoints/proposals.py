"""
Proposal API endpoints.
"""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from agency.db.session import get_db
from agency.controllers.proposal_controller import ProposalController
from agency.schemas.proposal import (
    ProposalCreate,
    ProposalUpdate,
    ProposalResponse,
    ProposalListResponse,
    ProposalMutationResponse,
    ProposalTotalsResponse,
)

router = APIRouter()


@router.post("", response_model=ProposalMutationResponse, status_code=status.HTTP_201_CREATED)
async def create_proposal(
    proposal_data: ProposalCreate,
    db: AsyncSession = Depends(get_db),
) -> ProposalMutationResponse:
    """Create a new proposal."""
    controller = ProposalController(db)
    return await controller.create_proposal(proposal_data)


@router.get("", response_model=ProposalListResponse)
async def list_proposals(
    db: AsyncSession = Depends(get_db),
) -> ProposalListResponse:
    """List proposals, newest first."""
    controller = ProposalController(db)
    return await controller.list_proposals()


@router.get("/{proposal_id}", response_model=ProposalResponse)
async def get_proposal(
    proposal_id: str,
    db: AsyncSession = Depends(get_db),
) -> ProposalResponse:
    """Get proposal by ID."""
    controller = ProposalController(db)
    proposal = await controller.get_proposal(proposal_id)
    if not proposal:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Proposal not found",
        )
    return proposal


@router.get("/{proposal_id}/totals", response_model=ProposalTotalsResponse)
async def get_proposal_totals(
    proposal_id: str,
    db: AsyncSession = Depends(get_db),
) -> ProposalTotalsResponse:
    """Subtotal, tax and grand total as printed."""
    controller = ProposalController(db)
    return await controller.get_proposal_totals(proposal_id)


@router.put("/{proposal_id}", response_model=ProposalMutationResponse)
async def update_proposal(
    proposal_id: str,
    proposal_data: ProposalUpdate,
    db: AsyncSession = Depends(get_db),
) -> ProposalMutationResponse:
    """Update a proposal."""
    controller = ProposalController(db)
    result = await controller.update_proposal(proposal_id, proposal_data)
    if not result:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Proposal not found",
        )
    return result


@router.delete("/{proposal_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_proposal(
    proposal_id: str,
    db: AsyncSession = Depends(get_db),
):
    """Delete a proposal."""
    controller = ProposalController(db)
    deleted = await controller.delete_proposal(proposal_id)
    if not deleted:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Proposal not found",
        )
