"""User ORM model: the owner of debts, reserves, cards and ledger rows."""

from sqlalchemy import Boolean, Index, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.models import Base, BaseModel


class User(Base, BaseModel):
    """
    Owner of every financial record in the system.

    Authentication happens outside this service; a user row only anchors
    ownership so every query can be filtered by (id, owner_id).
    """

    __tablename__ = "users"

    name: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        comment="Display name",
    )
    email: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        unique=True,
        comment="Login e-mail - unique identifier",
    )

    # Primary access gate
    is_active: Mapped[bool] = mapped_column(
        Boolean,
        default=True,
        nullable=False,
        index=True,
        comment="Inactive users cannot reach any finance endpoint",
    )

    __table_args__ = (Index("idx_user_email_unique", "email", unique=True),)

    # Relationships
    debts: Mapped[list["Debt"]] = relationship(  # noqa: F821
        "Debt",
        back_populates="owner",
        foreign_keys="Debt.owner_id",
    )
    reserves: Mapped[list["Reserve"]] = relationship(  # noqa: F821
        "Reserve",
        back_populates="owner",
        foreign_keys="Reserve.owner_id",
    )
    cards: Mapped[list["Card"]] = relationship(  # noqa: F821
        "Card",
        back_populates="owner",
        foreign_keys="Card.owner_id",
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, name={self.name!r}, is_active={self.is_active})>"


__all__ = ["User"]
