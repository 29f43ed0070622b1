from sqlalchemy import Column, Integer, String, Float, DateTime, Enum
from sqlalchemy.orm import relationship
from database import Base
import enum
from models.audit_mixin import TimestampMixin


class FeedType(enum.Enum):
    HAY = "HAY"
    CONCENTRATE = "CONCENTRATE"
    SILAGE = "SILAGE"
    MINERAL_SUPPLEMENT = "MINERAL_SUPPLEMENT"
    GRAIN = "GRAIN"
    OTHER = "OTHER"


class FeedInventory(Base, TimestampMixin):
    __tablename__ = "feed_inventory"

    id = Column(Integer, primary_key=True, index=True)
    feed_type = Column(Enum(FeedType), nullable=False)
    quantity = Column(Float, nullable=False, default=0.0)
    unit = Column(String, nullable=False, default="kg")  # e.g., "kg", "bales"
    min_threshold = Column(Float, nullable=False, default=0.0)
    cost = Column(Float, nullable=True)  # per unit
    supplier = Column(String, nullable=True)
    last_restocked = Column(DateTime, nullable=True)
    expiry_date = Column(DateTime, nullable=True)

    feed_records = relationship(
        "FeedRecord",
        back_populates="inventory",
        cascade="all, delete-orphan",
    )
