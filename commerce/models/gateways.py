from sqlalchemy import Boolean, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from commerce.db import Base


class Gateway(Base):
    __tablename__ = "gateways"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(160), nullable=False)
    handle: Mapped[str] = mapped_column(String(160), nullable=False, unique=True)
    is_frontend_enabled: Mapped[bool] = mapped_column(Boolean, default=True)

    orders = relationship("Order", back_populates="gateway")
