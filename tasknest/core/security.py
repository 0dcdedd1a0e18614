from urllib.parse import quote, unquote

from passlib.context import CryptContext

from tasknest.core.config import settings

pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__default_rounds=settings.BCRYPT_ROUNDS,
)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    if not hashed_password:
        return False
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def encode_session_email(email: str) -> str:
    """Cookie-safe form of the session email ("@" is not a legal cookie character)."""
    return quote(email, safe="")


def decode_session_email(raw: str) -> str:
    return unquote(raw).strip()
