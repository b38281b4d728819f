from sqlalchemy import Column, Integer, String, Float, Text
from shared.config.database import Base

class Product(Base):
    __tablename__ = "products"
    __table_args__ = {"schema": "product_schema"}

    # Catalog ids are opaque strings; orders reference them without a foreign key
    id = Column(String(64), primary_key=True, index=True)
    name = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    image = Column(String, nullable=True)
    category = Column(String, nullable=True)
    price = Column(Float, nullable=False)
    stock = Column(Integer, nullable=False, default=0)
