"""
Family membership workflow.

An individual's `family_id` is either NULL (unaffiliated) or one family id.
Create and add-member run inside a single transaction each, so a family row
never exists without its creator's membership and a member is never half-added.
"""
import logging
from typing import Optional

from sqlalchemy import select, insert, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from familygen.db import transaction
from familygen.errors import ValidationError, ConflictError, AuthError
from familygen.models import Individual, Family
from familygen.services import credential_store
from familygen.services.account_service import is_valid_sex, parse_birth_date
from familygen.services.auth_service import hash_password

logger = logging.getLogger(__name__)


async def _load_caller(db: AsyncSession, caller_id: int) -> Individual:
    caller = await credential_store.get_individual(db, caller_id)
    if caller is None:
        raise AuthError("Usuário não encontrado")
    return caller


def _iso(value) -> Optional[str]:
    return value.isoformat() if value else None


async def update_profile(db: AsyncSession, caller_id: int, diagnosis, genetic_panel) -> None:
    async with transaction(db):
        await credential_store.update_individual(
            db, caller_id, prior_diagnosis=diagnosis, genetic_panel=genetic_panel
        )
    logger.info("Updated clinical profile of individual id=%s", caller_id)


async def create_family(db: AsyncSession, caller_id: int, family_name) -> dict:
    if not family_name:
        raise ValidationError("Nome da família é obrigatório")

    caller = await _load_caller(db, caller_id)
    if caller.family_id:
        raise ConflictError("Você já pertence a uma família")

    try:
        async with transaction(db):
            res = await db.execute(
                insert(Family).values(name=family_name, creator_id=caller_id).returning(Family.id)
            )
            family_id = res.scalar_one()

            # compare-and-swap: only an unaffiliated caller joins the new family
            swapped = await db.execute(
                update(Individual)
                .where(Individual.id == caller_id, Individual.family_id.is_(None))
                .values(family_id=family_id)
            )
            if swapped.rowcount != 1:
                raise ConflictError("Você já pertence a uma família")
    except IntegrityError:
        logger.info("Duplicate family name %r", family_name)
        raise ConflictError("Já existe uma família com este nome")

    logger.info("Individual id=%s created family id=%s", caller_id, family_id)
    return {"id": family_id, "nome_familia": family_name, "criador_id": caller_id}


async def add_member(db: AsyncSession, caller_id: int, name, birth_date=None, sex=None, email=None) -> dict:
    """
    Attach a relative to the caller's family.

    An existing patient with `email` is moved into the family unless it belongs
    to a different one. Otherwise a new row is created already affiliated; its
    credential is the hash of an empty password so it can never log in.
    """
    if not name:
        raise ValidationError("Nome é obrigatório")
    if sex and not is_valid_sex(sex):
        raise ValidationError('Sexo deve ser "M" (masculino) ou "F" (feminino)')
    birth = None
    if birth_date:
        birth = parse_birth_date(birth_date)
        if birth is None:
            raise ValidationError("Data de nascimento inválida")

    caller = await _load_caller(db, caller_id)
    family_id = caller.family_id
    if not family_id:
        raise ConflictError("Você não pertence a nenhuma família")

    async with transaction(db):
        existing = None
        if email:
            res = await db.execute(select(Individual).where(Individual.email == email))
            existing = res.scalar_one_or_none()

        if existing is not None:
            if existing.family_id and existing.family_id != family_id:
                raise ConflictError("Este usuário já pertence a outra família")
            await credential_store.update_individual(db, existing.id, family_id=family_id)
            member = {
                "id": existing.id,
                "nome": existing.name,
                "data_nascimento": _iso(existing.birth_date),
                "sexo": existing.sex,
                "email": existing.email,
                "idFamilia": family_id,
            }
        else:
            # an email owned by a professional is rejected by the store
            member_id = await credential_store.create_individual(
                db,
                name=name,
                email=email or None,
                password_hash=hash_password(""),
                sex=sex or None,
                birth_date=birth,
                family_id=family_id,
            )
            member = {
                "id": member_id,
                "nome": name,
                "data_nascimento": _iso(birth),
                "sexo": sex or None,
                "email": email or None,
                "idFamilia": family_id,
            }

    logger.info("Individual id=%s added member id=%s to family id=%s", caller_id, member["id"], family_id)
    return member


async def get_roster(db: AsyncSession, caller_id: int) -> Optional[dict]:
    """The caller's family with every member, or None when unaffiliated."""
    q = (
        select(Family)
        .join(Individual, Individual.family_id == Family.id)
        .where(Individual.id == caller_id)
    )
    family = (await db.execute(q)).scalar_one_or_none()
    if family is None:
        return None

    res = await db.execute(
        select(Individual).where(Individual.family_id == family.id).order_by(Individual.id)
    )
    members = [
        {
            "idPaciente": m.id,
            "nome": m.name,
            "data_nascimento": _iso(m.birth_date),
            "sexo": m.sex,
            "email": m.email,
            "diagnostico_previo": m.prior_diagnosis,
            "painel_genetico": m.genetic_panel,
        }
        for m in res.scalars().all()
    ]
    return {
        "id": family.id,
        "nome_familia": family.name,
        "criador_id": family.creator_id,
        "membros": members,
    }


async def leave_family(db: AsyncSession, caller_id: int) -> None:
    # the family row stays even when this was its last member
    async with transaction(db):
        await credential_store.update_individual(db, caller_id, family_id=None)
    logger.info("Individual id=%s left their family", caller_id)
