from __future__ import annotations
from typing import Optional, List, Dict, Any
from pydantic import BaseModel, Field

# Request bodies use the Portuguese keys of the web client; English field
# names are accepted too (populate_by_name). Every field is optional here so
# that the workflows can report missing fields in their own order.

class _Body(BaseModel):
    class Config:
        populate_by_name = True

# 인증 흐름
class PatientRegister(_Body):
    """
    /auth/paciente/cadastro 요청 스키마.
    """
    name: Optional[str] = Field(None, alias="nome")
    email: Optional[str] = None
    password: Optional[str] = Field(None, alias="senha")
    sex: Optional[str] = Field(None, alias="sexo")
    birth_date: Optional[str] = Field(None, alias="data_nascimento")

class ProfessionalRegister(_Body):
    name: Optional[str] = Field(None, alias="nome")
    email: Optional[str] = None
    password: Optional[str] = Field(None, alias="senha")

class LoginRequest(_Body):
    email: Optional[str] = None
    password: Optional[str] = Field(None, alias="senha")

class AuthResponse(BaseModel):
    """
    Registration and login response: the signed token plus the same
    claims it carries (never the password hash).
    """
    message: str
    token: str
    user: Dict[str, Any]

class VerifyResponse(BaseModel):
    valid: bool = True
    user: Dict[str, Any]

class MessageResponse(BaseModel):
    message: str

# 프로필 / 가족
class ProfileUpdate(_Body):
    diagnosis: Optional[str] = Field(None, alias="diagnostico_previo")
    genetic_panel: Optional[str] = Field(None, alias="painel_genetico")

class FamilyCreate(_Body):
    family_name: Optional[str] = Field(None, alias="nome_familia")

class MemberCreate(_Body):
    name: Optional[str] = Field(None, alias="nome")
    birth_date: Optional[str] = Field(None, alias="data_nascimento")
    sex: Optional[str] = Field(None, alias="sexo")
    email: Optional[str] = None

class FamilyInfo(BaseModel):
    id: int
    nome_familia: str
    criador_id: Optional[int] = None

class FamilyCreateResponse(BaseModel):
    message: str
    familia: FamilyInfo

class MemberInfo(BaseModel):
    id: int
    nome: str
    data_nascimento: Optional[str] = None
    sexo: Optional[str] = None
    email: Optional[str] = None
    idFamilia: int

class MemberCreateResponse(BaseModel):
    message: str
    membro: MemberInfo

class RosterMember(BaseModel):
    idPaciente: int
    nome: str
    data_nascimento: Optional[str] = None
    sexo: Optional[str] = None
    email: Optional[str] = None
    diagnostico_previo: Optional[str] = None
    painel_genetico: Optional[str] = None

class Roster(FamilyInfo):
    membros: List[RosterMember] = []

class RosterResponse(BaseModel):
    familia: Optional[Roster] = None
