"""
Database models. Importing this package registers every table on Base.metadata.
"""

from agency.models.project import Project, ProjectStatus
from agency.models.account import Account, AccountStatus, BriefStatus, BriefFormType
from agency.models.transaction import Transaction, TransactionType
from agency.models.proposal import Proposal, ProposalStatus

__all__ = [
    "Project",
    "ProjectStatus",
    "Account",
    "AccountStatus",
    "BriefStatus",
    "BriefFormType",
    "Transaction",
    "TransactionType",
    "Proposal",
    "ProposalStatus",
]
