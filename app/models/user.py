"""ORM model for user accounts."""

from sqlalchemy import Column, String

from app.models.base import Base


class User(Base):
    """
    User account keyed by a caller-supplied id.

    password_hash holds the bcrypt digest (column "password"); plaintext is never stored.
    type and active_day are free-form strings with no enumeration or format check.
    """

    __tablename__ = "users"

    id = Column(String(255), primary_key=True)
    type = Column(String(255), nullable=False)
    username = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column("password", String(255), nullable=False)
    recovery_mail = Column(String(320), nullable=True)
    active_day = Column(String(64), nullable=True)

    def __repr__(self) -> str:
        return f"<User id={self.id!r} username={self.username!r}>"
