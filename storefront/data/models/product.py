from sqlalchemy import Boolean, Column, Integer, JSON, Numeric, String, Text

from storefront.data.database import Base


class ProductModel(Base):
    __tablename__ = "products"

    id = Column(String(36), primary_key=True)
    owner = Column(String(128), nullable=False, index=True)

    title = Column(String, nullable=False)
    description = Column(Text, nullable=False, default="")
    price = Column(Numeric(12, 2), nullable=False)
    stock = Column(Integer, nullable=False, default=0)
    active = Column(Boolean, nullable=False, default=True, index=True)
    brand = Column(String, nullable=False, default="")
    tags = Column(JSON, nullable=False, default=list)
    image_url = Column(String, nullable=False, default="")

    version = Column(Integer, nullable=False, default=1)
