from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.sql import func

from admin_portal.database import Base
from admin_portal.utils.time_utils import derive_current_year

class Admin(Base):
    __tablename__ = "admins"
    __table_args__ = (
        UniqueConstraint("student_id", name="uq_admins_student_id"),
        UniqueConstraint("email", name="uq_admins_email"),
    )

    id = Column(Integer, primary_key=True, index=True)
    student_id = Column(String(20), nullable=False, index=True)
    full_name = Column(String(100), nullable=False)
    email = Column(String(255), nullable=False, index=True)
    password_hash = Column(String(60), nullable=False)
    phone = Column(String(16), nullable=False)
    role_id = Column(Integer, ForeignKey("roles.id"), nullable=False)
    branch_id = Column(Integer, ForeignKey("branches.id"), nullable=True)
    graduation_year = Column(Integer, nullable=False)
    invitation_code = Column(String(20), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    @property
    def current_year(self) -> int:
        """Year of study, derived from the graduation year at read time."""
        return derive_current_year(self.graduation_year)
