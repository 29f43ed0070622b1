from sqlalchemy import Column, Integer, String, Float, Date, Enum, ForeignKey
from sqlalchemy.orm import relationship
from database import Base
import enum
from models.audit_mixin import TimestampMixin


class Gender(enum.Enum):
    MALE = "MALE"
    FEMALE = "FEMALE"


class CattleStatus(enum.Enum):
    ACTIVE = "ACTIVE"
    SOLD = "SOLD"
    DECEASED = "DECEASED"
    QUARANTINED = "QUARANTINED"


class CattleCategory(enum.Enum):
    BULL = "BULL"
    COW = "COW"
    HEIFER = "HEIFER"
    CALF = "CALF"
    STEER = "STEER"


class Cattle(Base, TimestampMixin):
    __tablename__ = "cattle"

    id = Column(Integer, primary_key=True, index=True)
    tag_number = Column(String, unique=True, index=True, nullable=False)
    name = Column(String, nullable=True)
    gender = Column(Enum(Gender), nullable=False)
    breed = Column(String, nullable=False)
    date_of_birth = Column(Date, nullable=False)
    weight = Column(Float, nullable=True)  # kg
    image_url = Column(String, nullable=True)
    status = Column(Enum(CattleStatus), default=CattleStatus.ACTIVE, nullable=False)
    category = Column(Enum(CattleCategory), nullable=False)
    mother_id = Column(Integer, ForeignKey("cattle.id", ondelete="SET NULL"), nullable=True)

    # Relationships
    mother = relationship("Cattle", remote_side=[id], back_populates="offspring")
    offspring = relationship("Cattle", back_populates="mother")
    milk_records = relationship("MilkRecord", back_populates="cattle")
    health_records = relationship("HealthRecord", back_populates="cattle", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<Cattle(id={self.id}, tag_number={self.tag_number}, status={self.status})>"
