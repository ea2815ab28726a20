# backend/familygen/errors.py
from typing import Optional


class DomainError(Exception):
    """Base for every error that maps to a client-visible `{"error": ...}` body."""

    status_code = 400
    default_message = "Requisição inválida"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(DomainError):
    status_code = 400


class ConflictError(DomainError):
    """Duplicate email, cross-family membership, already affiliated."""

    status_code = 400


class AuthError(DomainError):
    status_code = 401
    default_message = "Credenciais inválidas"


class ForbiddenError(AuthError):
    status_code = 403
    default_message = "Token inválido"


class InternalError(DomainError):
    status_code = 500
    default_message = "Erro interno do servidor"
