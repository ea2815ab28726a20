"""
Account registration and authentication workflows.

Both return the same shape: a signed token plus the user claims it carries.
"""
import logging
import re
from datetime import date, datetime
from typing import Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from familygen.db import transaction
from familygen.errors import ValidationError, AuthError
from familygen.models import Individual, Professional
from familygen.services import credential_store
from familygen.services.auth_service import (
    ROLE_PATIENT, ROLE_PROFESSIONAL, hash_password, verify_password, issue_token
)

logger = logging.getLogger(__name__)

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
PASSWORD_RE = re.compile(r"^(?=.*[A-Z])(?=.*\d)(?=.*[@$!%*?&])[A-Za-z\d@$!%*?&]{8,}$", re.ASCII)
SEXES = ("M", "F")
MIN_AGE, MAX_AGE = 1, 120

PASSWORD_POLICY_MESSAGE = (
    "Senha deve conter pelo menos 8 caracteres, 1 letra maiúscula, 1 número e 1 símbolo (@$!%*?&)"
)
INVALID_CREDENTIALS = "Credenciais inválidas"


def is_valid_email(email: str) -> bool:
    return bool(EMAIL_RE.match(email))


def is_valid_password(password: str) -> bool:
    return bool(PASSWORD_RE.match(password))


def is_valid_sex(sex: Optional[str]) -> bool:
    return sex in SEXES


def parse_birth_date(value: str) -> Optional[date]:
    """Accept 'YYYY-MM-DD' or a full ISO datetime; None when it is not a real date."""
    try:
        return date.fromisoformat(value)
    except (TypeError, ValueError):
        pass
    try:
        return datetime.fromisoformat(value).date()
    except (TypeError, ValueError):
        return None


def age_in_years(birth: date, today: Optional[date] = None) -> int:
    # year difference only; month and day are ignored
    today = today or date.today()
    return today.year - birth.year


def validate_birth_date(value: str, today: Optional[date] = None) -> Optional[date]:
    birth = parse_birth_date(value)
    if birth is None:
        return None
    if not MIN_AGE <= age_in_years(birth, today) <= MAX_AGE:
        return None
    return birth


def patient_claims(individual: Individual, family_name: Optional[str] = None) -> dict:
    return {
        "id": individual.id,
        "nome": individual.name,
        "email": individual.email,
        "tipo": ROLE_PATIENT,
        "sexo": individual.sex,
        "data_nascimento": individual.birth_date.isoformat() if individual.birth_date else None,
        "diagnostico_previo": individual.prior_diagnosis,
        "painel_genetico": individual.genetic_panel,
        "idFamilia": individual.family_id,
        "nome_familia": family_name,
    }


def professional_claims(professional: Professional) -> dict:
    return {
        "id": professional.id,
        "nome": professional.name,
        "email": professional.email,
        "tipo": ROLE_PROFESSIONAL,
    }


def _validate_common(name, email, password, required_message: str, extra_required=()) -> None:
    if not name or not email or not password or not all(extra_required):
        raise ValidationError(required_message)
    if not is_valid_email(email):
        raise ValidationError("Formato de email inválido")


async def register_patient(
    db: AsyncSession, name, email, password, sex, birth_date
) -> Tuple[str, dict]:
    _validate_common(
        name, email, password,
        "Nome, email, senha, sexo e data de nascimento são obrigatórios",
        extra_required=(sex, birth_date),
    )
    if not is_valid_sex(sex):
        raise ValidationError('Sexo deve ser "M" (masculino) ou "F" (feminino)')
    birth = validate_birth_date(birth_date)
    if birth is None:
        raise ValidationError(
            "Data de nascimento inválida. Deve ser uma data válida e a pessoa deve ter entre 1 e 120 anos."
        )
    if not is_valid_password(password):
        raise ValidationError(PASSWORD_POLICY_MESSAGE)

    async with transaction(db):
        individual_id = await credential_store.create_individual(
            db,
            name=name,
            email=email,
            password_hash=hash_password(password),
            sex=sex,
            birth_date=birth,
            prior_diagnosis=None,
            genetic_panel=None,
            family_id=None,
        )
    logger.info("Registered patient id=%s", individual_id)

    individual = Individual(
        id=individual_id, name=name, email=email, sex=sex, birth_date=birth,
        prior_diagnosis=None, genetic_panel=None, family_id=None,
    )
    user = patient_claims(individual)
    return issue_token(user), user


async def register_professional(db: AsyncSession, name, email, password) -> Tuple[str, dict]:
    _validate_common(name, email, password, "Nome, email e senha são obrigatórios")
    if not is_valid_password(password):
        raise ValidationError(PASSWORD_POLICY_MESSAGE)

    async with transaction(db):
        professional_id = await credential_store.create_professional(
            db, name=name, email=email, password_hash=hash_password(password)
        )
    logger.info("Registered professional id=%s", professional_id)

    user = professional_claims(Professional(id=professional_id, name=name, email=email))
    return issue_token(user), user


async def authenticate(db: AsyncSession, email, password) -> Tuple[str, dict]:
    if not email or not password:
        raise ValidationError("Email e senha são obrigatórios")

    identity = await credential_store.find_by_email(db, email)
    # same error for unknown email and wrong password
    if identity is None or not verify_password(password, identity.record.password_hash):
        logger.info("Rejected login attempt")
        raise AuthError(INVALID_CREDENTIALS)

    if identity.kind == ROLE_PATIENT:
        user = patient_claims(identity.record, identity.family_name)
    else:
        user = professional_claims(identity.record)
    logger.info("Login %s id=%s", identity.kind, user["id"])
    return issue_token(user), user
