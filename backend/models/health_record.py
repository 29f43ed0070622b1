from sqlalchemy import Column, Integer, String, Float, DateTime, Enum, ForeignKey, Text
from sqlalchemy.orm import relationship
from database import Base
import enum
from models.audit_mixin import TimestampMixin


class HealthRecordType(enum.Enum):
    VACCINATION = "VACCINATION"
    DEWORMING = "DEWORMING"
    CHECKUP = "CHECKUP"
    TREATMENT = "TREATMENT"
    SURGERY = "SURGERY"


class VaccinationType(enum.Enum):
    FMD = "FMD"
    BRUCELLOSIS = "BRUCELLOSIS"
    ANTHRAX = "ANTHRAX"
    BLACKLEG = "BLACKLEG"
    RABIES = "RABIES"
    OTHER = "OTHER"


class HealthStatus(enum.Enum):
    PENDING = "PENDING"
    COMPLETED = "COMPLETED"
    OVERDUE = "OVERDUE"
    CANCELLED = "CANCELLED"


class HealthRecord(Base, TimestampMixin):
    __tablename__ = "health_records"

    id = Column(Integer, primary_key=True, index=True)
    cattle_id = Column(Integer, ForeignKey("cattle.id", ondelete="CASCADE"), nullable=False, index=True)
    record_type = Column(Enum(HealthRecordType), nullable=False)
    vaccination_type = Column(Enum(VaccinationType), nullable=True)
    description = Column(Text, nullable=False)
    scheduled_date = Column(DateTime, nullable=False, index=True)
    completed_date = Column(DateTime, nullable=True)
    status = Column(Enum(HealthStatus), default=HealthStatus.PENDING, nullable=False)
    veterinarian = Column(String, nullable=True)
    cost = Column(Float, nullable=True)
    notes = Column(Text, nullable=True)

    cattle = relationship("Cattle", back_populates="health_records")
