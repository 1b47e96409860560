from enum import Enum


class Role(str, Enum):
    ADMIN = "ADMIN"
    USER = "USER"


class KeyClass(Enum):
    """Which signing key a token is expected to carry."""
    ACCESS = "access"
    REFRESH = "refresh"


REFRESH_TOKEN_TYPE = "refresh"
DEFAULT_ALGORITHM = "HS256"
