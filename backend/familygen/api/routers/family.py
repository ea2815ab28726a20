from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from familygen.config import API_PREFIX
from familygen.db import get_db
from familygen.services import family_service
from familygen.services.auth_service import get_current_patient
from familygen.schemas import (
    FamilyCreate, FamilyCreateResponse, MemberCreate, MemberCreateResponse,
    RosterResponse, MessageResponse
)

router = APIRouter(prefix=API_PREFIX, tags=["family"])

@router.post("/familia", response_model=FamilyCreateResponse, status_code=status.HTTP_201_CREATED)
async def create_family(
    body: FamilyCreate,
    db: AsyncSession = Depends(get_db),
    claims: dict = Depends(get_current_patient)
):
    """Create a family; the caller becomes its first member."""
    familia = await family_service.create_family(db, claims["id"], body.family_name)
    return {"message": "Família criada com sucesso", "familia": familia}

@router.post("/familia/membros", response_model=MemberCreateResponse, status_code=status.HTTP_201_CREATED)
async def add_member(
    body: MemberCreate,
    db: AsyncSession = Depends(get_db),
    claims: dict = Depends(get_current_patient)
):
    membro = await family_service.add_member(
        db, claims["id"], body.name, birth_date=body.birth_date, sex=body.sex, email=body.email
    )
    return {"message": "Membro adicionado com sucesso", "membro": membro}

@router.get("/minha-familia", response_model=RosterResponse)
async def get_my_family(
    db: AsyncSession = Depends(get_db),
    claims: dict = Depends(get_current_patient)
):
    # 가족이 없으면 familia = null (에러 아님)
    familia = await family_service.get_roster(db, claims["id"])
    return {"familia": familia}

@router.delete("/familia/sair", response_model=MessageResponse)
async def leave_family(
    db: AsyncSession = Depends(get_db),
    claims: dict = Depends(get_current_patient)
):
    await family_service.leave_family(db, claims["id"])
    return MessageResponse(message="Você saiu da família com sucesso")
