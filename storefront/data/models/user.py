from sqlalchemy import Column, Integer, String
from storefront.data.database import Base

class UserModel(Base):
    __tablename__ = "users"
    id = Column(String(128), primary_key=True)
    first_name = Column(String, nullable=False)
    last_name = Column(String, nullable=False)
    version = Column(Integer, nullable=False, default=1)
