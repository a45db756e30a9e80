# src/sitescout/core/auth.py
from fastapi import Depends, HTTPException
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
import jwt

from sitescout.core.settings import SECRET_KEY, ALGORITHM
from sitescout.core.jwt_key import load_hmac_key

security = HTTPBearer(auto_error=True)
SIGNING_KEY = load_hmac_key(SECRET_KEY)


def verify_token(credentials: HTTPAuthorizationCredentials = Depends(security)) -> dict:
    token = (credentials.credentials or "").strip()
    if not token:
        raise HTTPException(status_code=401, detail="Missing token")

    try:
        # exp 검증은 PyJWT가 수행 (verify_exp=True)
        return jwt.decode(token, SIGNING_KEY, algorithms=[ALGORITHM])
    except jwt.ExpiredSignatureError:
        raise HTTPException(status_code=401, detail="Token expired")
    except jwt.InvalidSignatureError:
        raise HTTPException(status_code=401, detail="Invalid signature")
    except jwt.InvalidTokenError:
        raise HTTPException(status_code=401, detail="Invalid token")
