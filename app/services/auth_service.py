from typing import Annotated, Optional

import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.core.config import settings
from app.schemas.context import UserContext

bearer_scheme = HTTPBearer(auto_error=False)


class AuthService:

    @staticmethod
    def decode_token(token: str) -> UserContext:
        try:
            payload = jwt.decode(
                token,
                settings.jwt_secret,
                algorithms=[settings.jwt_algorithm],
                audience=settings.jwt_audience,
            )
        except jwt.PyJWTError as e:
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Não autorizado") from e

        user_id = payload.get("sub")
        if not user_id:
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Não autorizado")
        role = payload.get("user_role") or payload.get("role") or "authenticated"
        return UserContext(user_id=str(user_id), role=role)

    @staticmethod
    async def get_current_user(
        credentials: Annotated[Optional[HTTPAuthorizationCredentials], Depends(bearer_scheme)],
    ) -> UserContext:
        if credentials is None:
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Não autorizado")
        return AuthService.decode_token(credentials.credentials)
