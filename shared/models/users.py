from sqlalchemy import TIMESTAMP, Column, ForeignKey, Integer, String, func
from passlib.context import CryptContext
from sqlalchemy.orm import relationship

from ..core.database import Base
from ..utils.enums import UserRole, UserStatus

password_context = CryptContext(schemes=['pbkdf2_sha256'], deprecated='auto')


class Users(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(100), unique=True, index=True, nullable=False)
    password = Column(String(255), nullable=False)

    email = Column(String(200), nullable=True)
    first_name = Column(String(100), nullable=True)
    last_name = Column(String(100), nullable=True)
    phone = Column(String(20), nullable=True)
    role = Column(String(16), nullable=False, default=UserRole.OWNER.value)
    # only set for owner accounts
    owner_id = Column(Integer, ForeignKey("owners.id"), nullable=True)
    status = Column(String(16), nullable=False,
                    default=UserStatus.ACTIVE.value)
    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())
    updated_at = Column(TIMESTAMP(timezone=True),
                        server_default=func.now(), onupdate=func.now())

    owner = relationship("Owner", back_populates="users")

    def set_password(self, password: str):
        self.password = password_context.hash(password)

    def verify_password(self, password: str) -> bool:
        return password_context.verify(password, self.password)

    @property
    def is_super_admin(self) -> bool:
        return self.role == UserRole.SUPER_ADMIN.value
