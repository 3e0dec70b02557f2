from infrastructure.security.passwords import BcryptPasswordHasher
from infrastructure.security.tokens import JwtTokenCodec, bearer_token

__all__ = ["BcryptPasswordHasher", "JwtTokenCodec", "bearer_token"]
