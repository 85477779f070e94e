# zbank/models/user.py
from sqlalchemy import Column, Integer, String, BigInteger, DateTime, func
from sqlalchemy.orm import relationship

from zbank.db.base_class import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, unique=True, index=True, nullable=False)
    name = Column(String, nullable=True)
    hashed_password = Column(String, nullable=False)

    # Account-level balance, credited by transfers when no recipient card is selected
    balance_cents = Column(BigInteger, nullable=False, default=0)

    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    cards = relationship(
        "Card", back_populates="user", cascade="all, delete-orphan", order_by="Card.id"
    )
    transactions = relationship(
        "Transaction", back_populates="user", cascade="all, delete-orphan"
    )

    @property
    def balance(self) -> float:
        return (self.balance_cents or 0) / 100

