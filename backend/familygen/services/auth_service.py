from datetime import datetime, timedelta, timezone
from typing import Optional
from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError, jwt
from passlib.context import CryptContext

from familygen.config import SECRET_KEY, ALGORITHM, TOKEN_EXPIRE_HOURS, BCRYPT_ROUNDS
from familygen.errors import AuthError, ForbiddenError

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=BCRYPT_ROUNDS)
# auto_error=False: a missing header must be a 401 with our own body, not FastAPI's
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login", auto_error=False)

ROLE_PATIENT = "paciente"
ROLE_PROFESSIONAL = "profissional"

def verify_password(plain_password, password_hash):
    if not plain_password or not password_hash:
        return False
    try:
        return pwd_context.verify(plain_password, password_hash)
    except ValueError:
        # unidentifiable or malformed stored hash
        return False

def hash_password(password):

    if not isinstance(password, (str, bytes)):
        raise TypeError("Password must be a string or bytes.")

    return pwd_context.hash(password)

def issue_token(claims: dict, expires_delta: Optional[timedelta] = None):
    """
    Sign a copy of `claims` with the server secret.
    `sub` mirrors the numeric `id`; the token expires TOKEN_EXPIRE_HOURS after issuance.
    """
    to_encode = claims.copy()
    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(hours=TOKEN_EXPIRE_HOURS)
    to_encode.update({"sub": str(claims["id"]), "exp": expire})
    encoded_jwt = jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)
    return encoded_jwt

def verify_token(token: Optional[str]) -> dict:
    """Decode a bearer token back into its claims."""
    if not token:
        raise AuthError("Token de acesso requerido")
    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError:
        raise ForbiddenError("Token inválido")

    if payload.get("id") is None or payload.get("tipo") not in (ROLE_PATIENT, ROLE_PROFESSIONAL):
        raise ForbiddenError("Token inválido")
    return payload


async def get_current_claims(token: Optional[str] = Depends(oauth2_scheme)) -> dict:
    """
    Guard for protected routes. Claims are a snapshot taken at login and
    are not re-read from the database.
    """
    return verify_token(token)

async def get_current_patient(claims: dict = Depends(get_current_claims)) -> dict:
    if claims.get("tipo") != ROLE_PATIENT:
        raise ForbiddenError("Acesso permitido apenas para pacientes")
    return claims
