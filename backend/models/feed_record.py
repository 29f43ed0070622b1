from sqlalchemy import Column, Integer, Float, Date, ForeignKey, Text
from sqlalchemy.orm import relationship
from database import Base
from models.audit_mixin import TimestampMixin


class FeedRecord(Base, TimestampMixin):
    __tablename__ = "feed_records"

    id = Column(Integer, primary_key=True, index=True)
    inventory_id = Column(Integer, ForeignKey("feed_inventory.id", ondelete="CASCADE"), nullable=False, index=True)
    date = Column(Date, nullable=False, index=True)
    quantity_used = Column(Float, nullable=False)
    notes = Column(Text, nullable=True)

    inventory = relationship("FeedInventory", back_populates="feed_records")
