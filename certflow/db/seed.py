"""
Optional development seeding script.

Run with: python -m certflow.db.seed
"""

import asyncio

from certflow.core.database import init_db, session_scope
from certflow.core.logging import configure_logging, get_logger
from certflow.models.profile import ProfileCreate, ProfileRole
from certflow.models.project import ProjectCreate
from certflow.models.certificate_request import CertificateRequestCreate
from certflow.handlers.submissions import create_profile, submit_project
from certflow.handlers.certificate_requests import create_certificate_request

logger = get_logger(__name__)


async def seed_data():
    """Seed database with sample data for development."""
    await init_db()
    
    async with session_scope() as session:
        submitter = await create_profile(session, ProfileCreate(
            full_name="Asha Verma",
            organization="Green Earth Collective",
            role=ProfileRole.SUBMITTER
        ))
        verifier = await create_profile(session, ProfileCreate(
            full_name="Daniel Okafor",
            organization="Independent Verification Bureau",
            role=ProfileRole.VERIFIER
        ))
        ngo = await create_profile(session, ProfileCreate(
            full_name="Meera Pillai",
            organization="Coastal Restoration Trust",
            role=ProfileRole.NGO
        ))
        logger.info(
            "Created profiles",
            extra={"submitter_id": submitter.id, "verifier_id": verifier.id, "ngo_id": ngo.id}
        )

        mangrove = await submit_project(session, ProjectCreate(
            title="Mangrove Restoration - Sundarbans Fringe",
            location="West Bengal, India",
            area_hectares=120.5,
            description="Replanting degraded mangrove belts along tidal creeks.",
            estimated_credits=500,
            submitter_id=submitter.id
        ))
        await submit_project(session, ProjectCreate(
            title="Community Agroforestry",
            location="Wayanad, Kerala, India",
            area_hectares=42.0,
            description="Shade-grown coffee with native canopy trees.",
            estimated_credits=180,
            submitter_id=submitter.id
        ))

        await create_certificate_request(session, CertificateRequestCreate(
            project_id=mangrove.id,
            requester_id=ngo.id
        ))

    logger.info("Seed data created successfully")


if __name__ == "__main__":
    configure_logging()
    asyncio.run(seed_data())
