from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from familygen.config import API_PREFIX
from familygen.db import get_db
from familygen.services import family_service
from familygen.services.auth_service import get_current_patient
from familygen.schemas import ProfileUpdate, MessageResponse

router = APIRouter(prefix=API_PREFIX, tags=["profile"])

# 프로필 업데이트 (진단 / 유전자 패널)
@router.put("/perfil", response_model=MessageResponse)
async def update_profile(
    profile_in: ProfileUpdate,
    db: AsyncSession = Depends(get_db),
    claims: dict = Depends(get_current_patient)
):
    """
    Replace the caller's prior diagnosis and genetic panel reference.
    Either field may be null.
    """
    await family_service.update_profile(db, claims["id"], profile_in.diagnosis, profile_in.genetic_panel)
    return MessageResponse(message="Perfil atualizado com sucesso")
