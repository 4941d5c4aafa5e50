from sqlalchemy import Boolean, Column, DateTime, Float, Integer, String, Text

from .database import Base


class Transaction(Base):
    __tablename__ = "transactions"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(Text, nullable=True)
    description = Column(Text, nullable=True)
    price = Column(Float, nullable=True)
    category = Column(String(255), nullable=True)
    date_of_sale = Column(DateTime, nullable=True)  # naive UTC
    sold = Column(Boolean, nullable=True)
