"""
Carbon credit issuance handler.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select
from typing import List

from certflow.models.credit import CarbonCredit, CreditStatus
from certflow.models.project import Project
from certflow.handlers.audit import audit_entry


async def issue_carbon_credit(
    session: AsyncSession,
    project: Project,
    issued_by: int
) -> CarbonCredit:
    """
    Issue credits for a verified project to its submitter.

    The amount is the project's estimated credits as currently loaded,
    so callers refresh the project after committing its status change.
    Database errors propagate to the caller.
    """
    credit = CarbonCredit(
        project_id=project.id,
        owner_id=project.submitter_id,
        credits_amount=project.estimated_credits,
        status=CreditStatus.ACTIVE
    )
    session.add(credit)
    await session.flush()

    session.add(audit_entry(
        action="credit_issued",
        entity_type="carbon_credit",
        entity_id=credit.id,
        payload={
            "project_id": project.id,
            "owner_id": project.submitter_id,
            "credits_amount": project.estimated_credits
        },
        actor_id=issued_by
    ))
    await session.commit()
    await session.refresh(credit)

    return credit


async def get_credits_by_project(
    session: AsyncSession,
    project_id: int
) -> List[CarbonCredit]:
    """Get all credits issued for a project, oldest first."""
    statement = select(CarbonCredit).where(
        CarbonCredit.project_id == project_id
    ).order_by(CarbonCredit.issued_at, CarbonCredit.id)
    
    result = await session.execute(statement)
    return list(result.scalars().all())
