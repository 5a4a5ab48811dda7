import jwt

from dental_backend.core import config


def decode_access_token(token: str) -> dict:
    return jwt.decode(
        token,
        config.AUTH_JWT_SECRET,
        algorithms=[config.JWT_ALGORITHM],
        audience=config.JWT_AUDIENCE,
    )
