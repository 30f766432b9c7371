"""Password hashing — bcrypt via passlib's CryptContext."""

from passlib.context import CryptContext


class PasswordHasher:
    """Hashes and checks credentials. Work factor comes from settings."""

    def __init__(self, rounds: int = 12):
        self._context = CryptContext(
            schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=rounds,
        )

    def hash(self, password: str) -> str:
        return self._context.hash(password)

    def verify(self, password: str, password_hash: str) -> bool:
        return self._context.verify(password, password_hash)
