from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from familygen.db import get_db
from familygen.services import account_service
from familygen.services.auth_service import get_current_claims
from familygen.schemas import (
    PatientRegister, ProfessionalRegister, LoginRequest, AuthResponse, VerifyResponse
)

router = APIRouter(prefix="/auth", tags=["auth"])

@router.post("/paciente/cadastro", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register_patient(body: PatientRegister, db: AsyncSession = Depends(get_db)):
    token, user = await account_service.register_patient(
        db, body.name, body.email, body.password, body.sex, body.birth_date
    )
    return AuthResponse(message="Paciente cadastrado com sucesso", token=token, user=user)

@router.post("/profissional/cadastro", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register_professional(body: ProfessionalRegister, db: AsyncSession = Depends(get_db)):
    token, user = await account_service.register_professional(
        db, body.name, body.email, body.password
    )
    return AuthResponse(message="Profissional de saúde cadastrado com sucesso", token=token, user=user)

@router.post("/login", response_model=AuthResponse)
async def login(body: LoginRequest, db: AsyncSession = Depends(get_db)):
    """
    Login for both patients and professionals.
    Unknown email and wrong password produce the same 401.
    """
    token, user = await account_service.authenticate(db, body.email, body.password)
    return AuthResponse(message="Login realizado com sucesso", token=token, user=user)

@router.get("/verificar", response_model=VerifyResponse)
async def verify(claims: dict = Depends(get_current_claims)):
    return VerifyResponse(valid=True, user=claims)
