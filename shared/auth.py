# shared/auth.py
from datetime import datetime, timedelta
from typing import Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordBearer
from jose import ExpiredSignatureError, JWTError, jwt
from passlib.context import CryptContext

from shared.config import settings
from shared.exceptions import AccessDenied, LoginRequired

ADMIN_ROLE = "Admin"

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

def verify_password(plain_password, hashed_password):
    if not hashed_password:
        return False
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except ValueError:
        # stored value is not a recognised hash
        return False

def get_password_hash(password):
    return pwd_context.hash(password)

def create_access_token(data: dict, expires_delta: timedelta = None):
    to_encode = data.copy()
    expire = datetime.utcnow() + (expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode.update({
        "exp": expire,
        "iss": settings.JWT_ISSUER,
        "aud": settings.JWT_AUDIENCE,
    })
    encoded_jwt = jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.JWT_ALGORITHM)
    return encoded_jwt

def _decode(token: str) -> dict:
    return jwt.decode(
        token,
        settings.SECRET_KEY,
        algorithms=[settings.JWT_ALGORITHM],
        audience=settings.JWT_AUDIENCE,
        issuer=settings.JWT_ISSUER,
    )

def decode_token(token: str):
    try:
        return _decode(token)
    except JWTError:
        return None

def _principal(payload: dict) -> dict:
    return {
        "user_id": payload.get("sub"),
        "email": payload.get("email"),
        "role": payload.get("role"),
        "name": payload.get("name"),
    }


# --- API (bearer token) ---
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="api/auth/login", auto_error=False)

def get_current_user(token: Optional[str] = Depends(oauth2_scheme)):
    headers = {"WWW-Authenticate": "Bearer"}
    payload = None
    if token:
        try:
            payload = _decode(token)
        except ExpiredSignatureError:
            headers["Token-Expired"] = "true"
        except JWTError:
            pass
    if not payload or not payload.get("sub"):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authentication credentials",
            headers=headers,
        )
    return _principal(payload)

def get_current_admin_user(current_user: dict = Depends(get_current_user)):
    if current_user["role"] != ADMIN_ROLE:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Not authorized to perform this action",
        )
    return current_user


# --- Web (session cookie) ---
def create_session_token(data: dict):
    return create_access_token(data, timedelta(hours=settings.SESSION_EXPIRE_HOURS))

def get_web_user(request: Request) -> Optional[dict]:
    """Signed-in user from the session cookie, or None"""
    token = request.cookies.get(settings.SESSION_COOKIE_NAME)
    if not token:
        return None
    payload = decode_token(token)
    if not payload or not payload.get("sub"):
        return None
    return _principal(payload)

def require_web_admin(request: Request, current_user: Optional[dict] = Depends(get_web_user)):
    if current_user is None:
        return_url = request.url.path
        if request.url.query:
            return_url = f"{return_url}?{request.url.query}"
        raise LoginRequired(return_url)
    if current_user["role"] != ADMIN_ROLE:
        raise AccessDenied()
    return current_user
