from sqlalchemy import Column, Integer, Float, Date, Enum, ForeignKey, Text
from sqlalchemy.orm import relationship
from database import Base
import enum
from models.audit_mixin import TimestampMixin


class MilkSession(enum.Enum):
    MORNING = "MORNING"
    AFTERNOON = "AFTERNOON"
    EVENING = "EVENING"


class MilkQuality(enum.Enum):
    EXCELLENT = "EXCELLENT"
    GOOD = "GOOD"
    FAIR = "FAIR"
    POOR = "POOR"


class MilkRecord(Base, TimestampMixin):
    __tablename__ = "milk_records"

    id = Column(Integer, primary_key=True, index=True)
    # Bulk tank collections are not attributed to a single animal
    cattle_id = Column(Integer, ForeignKey("cattle.id", ondelete="SET NULL"), nullable=True, index=True)
    date = Column(Date, nullable=False, index=True)
    liters = Column(Float, nullable=False)
    session = Column(Enum(MilkSession), nullable=False)
    quality = Column(Enum(MilkQuality), default=MilkQuality.GOOD, nullable=False)
    notes = Column(Text, nullable=True)

    cattle = relationship("Cattle", back_populates="milk_records")
