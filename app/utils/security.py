from passlib.context import CryptContext
from jose import ExpiredSignatureError, JWTError, jwt
from datetime import datetime, timedelta, timezone
from typing import Optional
from dotenv import load_dotenv
import logging
import os
import uuid

from app.utils.exceptions import InvalidTokenError, TokenExpiredError

# Load environment variables
load_dotenv()
logger = logging.getLogger(__name__)

# Security settings
BCRYPT_ROUNDS = int(os.getenv("BCRYPT_ROUNDS", "12"))
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=BCRYPT_ROUNDS)

ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
ACCESS_TOKEN_SECRET = os.getenv("JWT_SECRET") or "dev-access-secret-change-me"
REFRESH_TOKEN_SECRET = os.getenv("JWT_REFRESH_SECRET") or "dev-refresh-secret-change-me"
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "15"))
REFRESH_TOKEN_EXPIRE_DAYS = int(os.getenv("REFRESH_TOKEN_EXPIRE_DAYS", "7"))

if not os.getenv("JWT_SECRET") or not os.getenv("JWT_REFRESH_SECRET"):
    logger.warning("JWT_SECRET / JWT_REFRESH_SECRET not set, using development signing keys")

# Bcrypt only looks at the first 72 bytes of a password
BCRYPT_MAX_BYTES = 72


# Password hashing and verification
def hash_password(password: str) -> str:
    """Hash a password with a salted bcrypt digest"""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash"""
    return pwd_context.verify(plain_password, hashed_password)


def dummy_verify() -> None:
    """Spend the same time as a real verification when there is no hash to check"""
    pwd_context.dummy_verify()


# JWT token creation and decoding
def _encode(claims: dict, secret: str, token_type: str, expires_delta: timedelta) -> str:
    issued_at = datetime.now(timezone.utc)
    to_encode = claims.copy()
    to_encode.update({
        "type": token_type,
        "iat": issued_at,
        "exp": issued_at + expires_delta,
        # Unique per token, so two tokens issued in the same second still differ
        "jti": uuid.uuid4().hex,
    })
    return jwt.encode(to_encode, secret, algorithm=ALGORITHM)


def create_access_token(user_id: str, email: str, expires_delta: Optional[timedelta] = None) -> str:
    return _encode(
        {"sub": str(user_id), "user_id": str(user_id), "email": email},
        ACCESS_TOKEN_SECRET,
        "access",
        expires_delta or timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES),
    )


def create_refresh_token(user_id: str, expires_delta: Optional[timedelta] = None) -> str:
    return _encode(
        {"sub": str(user_id), "user_id": str(user_id)},
        REFRESH_TOKEN_SECRET,
        "refresh",
        expires_delta or timedelta(days=REFRESH_TOKEN_EXPIRE_DAYS),
    )


def decode_access_token(token: str) -> dict:
    """
    Verify signature and expiry of an access token.

    Raises TokenExpiredError for an expired token and InvalidTokenError for
    anything else that fails verification.
    """
    try:
        payload = jwt.decode(token, ACCESS_TOKEN_SECRET, algorithms=[ALGORITHM])
    except ExpiredSignatureError:
        raise TokenExpiredError()
    except JWTError:
        raise InvalidTokenError()

    if payload.get("type") != "access" or not payload.get("user_id"):
        raise InvalidTokenError()
    return payload


def decode_refresh_token(token: str) -> dict:
    """Verify a refresh token; every failure, expiry included, is InvalidTokenError"""
    try:
        payload = jwt.decode(token, REFRESH_TOKEN_SECRET, algorithms=[ALGORITHM])
    except JWTError:
        raise InvalidTokenError("Invalid refresh token")

    if payload.get("type") != "refresh" or not payload.get("user_id"):
        raise InvalidTokenError("Invalid refresh token")
    return payload
