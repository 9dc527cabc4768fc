from datetime import datetime, timedelta, timezone
from typing import Any

from jose import JWTError, jwt  # type: ignore

from physioai.core.config import settings
from physioai.schemas.auth import Identity, UserRole


class InvalidTokenError(Exception):
    pass


def create_access_token(identity: Identity) -> str:
    exp = datetime.now(timezone.utc) + timedelta(minutes=settings.access_token_expire_minutes)
    payload: dict[str, Any] = {
        "sub": identity.subject,
        "role": identity.role.value,
        "name": identity.name,
        "exp": exp,
    }
    if identity.selected_patient_id:
        payload["sel"] = identity.selected_patient_id
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_token(token: str) -> dict[str, Any]:
    return jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])


def identity_from_token(token: str) -> Identity:
    try:
        payload = decode_token(token)
        return Identity(
            role=UserRole(payload["role"]),
            subject=str(payload["sub"]),
            name=str(payload.get("name") or ""),
            selected_patient_id=payload.get("sel"),
        )
    except (JWTError, KeyError, ValueError) as exc:
        raise InvalidTokenError(str(exc)) from exc
