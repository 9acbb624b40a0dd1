from sqlalchemy import Column, Integer, String

from admin_portal.database import Base

class Role(Base):
    __tablename__ = "roles"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(50), unique=True, nullable=False)
    access_level = Column(Integer, nullable=False, default=0)
