"""
Credential store over the two identity kinds.

Individuals and professionals live in separate tables but share one email
namespace; every lookup here goes through both.
"""
import logging
from dataclasses import dataclass
from typing import Optional, Union

from sqlalchemy import select, insert, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from familygen.errors import ConflictError
from familygen.models import Individual, Professional, Family
from familygen.services.auth_service import ROLE_PATIENT, ROLE_PROFESSIONAL

logger = logging.getLogger(__name__)

DUPLICATE_MESSAGES = {
    ROLE_PATIENT: "Email já cadastrado como paciente",
    ROLE_PROFESSIONAL: "Email já cadastrado como profissional",
}


@dataclass
class Identity:
    kind: str
    record: Union[Individual, Professional]
    family_name: Optional[str] = None


async def find_by_email(db: AsyncSession, email: str) -> Optional[Identity]:
    # individuals first, joined with their family for the name
    q = (
        select(Individual, Family.name)
        .outerjoin(Family, Individual.family_id == Family.id)
        .where(Individual.email == email)
    )
    row = (await db.execute(q)).first()
    if row is not None:
        return Identity(kind=ROLE_PATIENT, record=row[0], family_name=row[1])

    res = await db.execute(select(Professional).where(Professional.email == email))
    professional = res.scalar_one_or_none()
    if professional is not None:
        return Identity(kind=ROLE_PROFESSIONAL, record=professional)
    return None


async def email_collision(db: AsyncSession, email: str) -> Optional[str]:
    """Return the identity kind that already owns `email`, if any."""
    res = await db.execute(select(Individual.id).where(Individual.email == email))
    if res.first() is not None:
        return ROLE_PATIENT
    res = await db.execute(select(Professional.id).where(Professional.email == email))
    if res.first() is not None:
        return ROLE_PROFESSIONAL
    return None


async def ensure_email_available(db: AsyncSession, email: Optional[str]) -> None:
    if not email:
        return
    kind = await email_collision(db, email)
    if kind is not None:
        raise ConflictError(DUPLICATE_MESSAGES[kind])


async def create_individual(db: AsyncSession, **fields) -> int:
    """
    Insert a patient row and return its id. Does not commit.
    """
    await ensure_email_available(db, fields.get("email"))
    try:
        res = await db.execute(insert(Individual).values(**fields).returning(Individual.id))
    except IntegrityError:
        # lost a race against another insert with the same email
        logger.info("Duplicate email on individual insert")
        raise ConflictError("Email já cadastrado")
    return res.scalar_one()


async def create_professional(db: AsyncSession, **fields) -> int:
    await ensure_email_available(db, fields.get("email"))
    try:
        res = await db.execute(insert(Professional).values(**fields).returning(Professional.id))
    except IntegrityError:
        logger.info("Duplicate email on professional insert")
        raise ConflictError("Email já cadastrado")
    return res.scalar_one()


async def get_individual(db: AsyncSession, individual_id: int) -> Optional[Individual]:
    res = await db.execute(select(Individual).where(Individual.id == individual_id))
    return res.scalar_one_or_none()


async def update_individual(db: AsyncSession, individual_id: int, **fields) -> int:
    """Update a patient row; returns the number of rows touched. Does not commit."""
    res = await db.execute(
        update(Individual).where(Individual.id == individual_id).values(**fields)
    )
    return res.rowcount
