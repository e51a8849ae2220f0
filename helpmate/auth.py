# helpmate/auth.py
from datetime import datetime, timedelta, timezone
from jose import jwt, JWTError
from passlib.context import CryptContext
from helpmate import config
from helpmate.errors import Unauthenticated
from helpmate.models import User

# Use argon2 for password hashing
pwd_context = CryptContext(schemes=["argon2"], deprecated="auto")


# Hash password
def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


# Verify password
def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


# Create JWT token for a user
def create_access_token(user: User, expires_delta: timedelta | None = None) -> str:
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=config.ACCESS_TOKEN_EXPIRE_MINUTES))
    claims = {"sub": user.id, "email": user.email, "role": user.role.value, "exp": expire}
    return jwt.encode(claims, config.JWT_SECRET, algorithm=config.JWT_ALGORITHM)


# Decode JWT token, expired or tampered tokens are rejected by jose
def decode_access_token(token: str) -> dict:
    try:
        payload = jwt.decode(token, config.JWT_SECRET, algorithms=[config.JWT_ALGORITHM])
    except JWTError:
        raise Unauthenticated("Invalid or expired token")
    if payload.get("sub") is None:
        raise Unauthenticated("Invalid token")
    return payload
