from typing import Callable, Optional

import jwt
from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from .config import Settings


auth_scheme = HTTPBearer(auto_error=False)


def make_token_verifier(settings: Settings) -> Callable[..., Optional[dict]]:
    """Dependency checking the caller's bearer token when JWT_SECRET is set.

    Without a secret every request passes and the dependency yields None.
    """

    def verify(credentials: Optional[HTTPAuthorizationCredentials] = Depends(auth_scheme)) -> Optional[dict]:
        if not settings.JWT_SECRET:
            return None
        if credentials is None:
            raise HTTPException(status_code=401, detail="Missing bearer token")
        try:
            return jwt.decode(
                credentials.credentials,
                settings.JWT_SECRET,
                algorithms=[settings.JWT_ALG],
                audience=settings.JWT_AUD,
            )
        except jwt.PyJWTError:
            raise HTTPException(status_code=401, detail="Invalid or expired token")

    return verify
