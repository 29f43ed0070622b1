import logging
from datetime import date
from typing import Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload

from exceptions import NotFoundError, ValidationError
from models.feed_inventory import FeedInventory, FeedType
from models.feed_record import FeedRecord
from schemas.feed import FeedInventoryCreate, FeedInventoryUpdate, FeedRestock, FeedUsageCreate
from utils.dates import local_now

logger = logging.getLogger(__name__)

RECENT_USAGE_RECORDS = 10
FEED_USAGE_LIMIT = 100


def get_feed_inventory(db: Session, inventory_id: int) -> FeedInventory:
    db_inventory = db.query(FeedInventory).filter(FeedInventory.id == inventory_id).first()
    if db_inventory is None:
        raise NotFoundError("Feed inventory not found")
    return db_inventory


def get_all_feed_inventory(db: Session) -> List[FeedInventory]:
    return db.query(FeedInventory).order_by(FeedInventory.created_at.desc(), FeedInventory.id.desc()).all()


def get_usage_for_inventory(db: Session, inventory_id: int) -> List[FeedRecord]:
    return (
        db.query(FeedRecord)
        .filter(FeedRecord.inventory_id == inventory_id)
        .order_by(FeedRecord.date.desc(), FeedRecord.id.desc())
        .all()
    )


def get_recent_usage(db: Session, limit: int = RECENT_USAGE_RECORDS) -> Dict[int, List[FeedRecord]]:
    """The latest ``limit`` usage records per inventory item, newest first."""
    ranked = (
        db.query(
            FeedRecord.id.label("id"),
            func.row_number().over(
                partition_by=FeedRecord.inventory_id,
                order_by=(FeedRecord.date.desc(), FeedRecord.id.desc()),
            ).label("rn"),
        )
        .subquery()
    )
    records = (
        db.query(FeedRecord)
        .join(ranked, FeedRecord.id == ranked.c.id)
        .filter(ranked.c.rn <= limit)
        .order_by(FeedRecord.date.desc(), FeedRecord.id.desc())
        .all()
    )
    grouped: Dict[int, List[FeedRecord]] = {}
    for record in records:
        grouped.setdefault(record.inventory_id, []).append(record)
    return grouped


def count_usage_records(db: Session) -> Dict[int, int]:
    rows = db.query(FeedRecord.inventory_id, func.count(FeedRecord.id)).group_by(FeedRecord.inventory_id).all()
    return {inventory_id: count for inventory_id, count in rows}


def create_feed_inventory(db: Session, feed: FeedInventoryCreate) -> FeedInventory:
    data = feed.model_dump()
    if data.get("last_restocked") is None:
        data["last_restocked"] = local_now()
    db_inventory = FeedInventory(**data)
    db.add(db_inventory)
    db.commit()
    db.refresh(db_inventory)
    return db_inventory


def update_feed_inventory(db: Session, inventory_id: int, feed: FeedInventoryUpdate) -> FeedInventory:
    db_inventory = get_feed_inventory(db, inventory_id)
    for key, value in feed.model_dump().items():
        setattr(db_inventory, key, value)
    db.commit()
    db.refresh(db_inventory)
    return db_inventory


def delete_feed_inventory(db: Session, inventory_id: int) -> FeedInventory:
    db_inventory = get_feed_inventory(db, inventory_id)
    db.delete(db_inventory)
    db.commit()
    return db_inventory


def get_feed_usage(db: Session, inventory_id: Optional[int] = None, limit: int = FEED_USAGE_LIMIT) -> List[FeedRecord]:
    query = db.query(FeedRecord).options(joinedload(FeedRecord.inventory))
    if inventory_id is not None:
        query = query.filter(FeedRecord.inventory_id == inventory_id)
    return query.order_by(FeedRecord.date.desc(), FeedRecord.id.desc()).limit(limit).all()


def record_feed_usage(db: Session, usage: FeedUsageCreate) -> FeedRecord:
    """
    Debit ``usage.quantity_used`` from the inventory and append the usage record.

    The decrement is a single conditional UPDATE, so two concurrent submissions
    can never take the quantity below zero; the record insert commits in the
    same transaction.
    """
    get_feed_inventory(db, usage.inventory_id)

    updated = (
        db.query(FeedInventory)
        .filter(FeedInventory.id == usage.inventory_id, FeedInventory.quantity >= usage.quantity_used)
        .update({FeedInventory.quantity: FeedInventory.quantity - usage.quantity_used}, synchronize_session=False)
    )
    if updated == 0:
        db.rollback()
        available = db.query(FeedInventory.quantity).filter(FeedInventory.id == usage.inventory_id).scalar()
        if available is None:
            raise NotFoundError("Feed inventory not found")
        logger.info(
            "Rejected feed usage of %s from inventory %s: only %s available",
            usage.quantity_used, usage.inventory_id, available,
        )
        raise ValidationError("Insufficient inventory", available=available, requested=usage.quantity_used)

    db_record = FeedRecord(**usage.model_dump())
    db.add(db_record)
    db.commit()
    db.refresh(db_record)
    return db_record


def restock_feed(db: Session, restock: FeedRestock) -> FeedInventory:
    get_feed_inventory(db, restock.inventory_id)

    values = {
        FeedInventory.quantity: FeedInventory.quantity + restock.quantity_added,
        FeedInventory.last_restocked: local_now(),
    }
    if restock.cost is not None:
        values[FeedInventory.cost] = restock.cost
    if restock.supplier is not None:
        values[FeedInventory.supplier] = restock.supplier
    if restock.expiry_date is not None:
        values[FeedInventory.expiry_date] = restock.expiry_date

    updated = (
        db.query(FeedInventory)
        .filter(FeedInventory.id == restock.inventory_id)
        .update(values, synchronize_session=False)
    )
    if updated == 0:
        db.rollback()
        raise NotFoundError("Feed inventory not found")
    db.commit()
    return get_feed_inventory(db, restock.inventory_id)


def get_feed_levels(db: Session) -> List[FeedInventory]:
    return db.query(FeedInventory).order_by(FeedInventory.created_at.asc(), FeedInventory.id.asc()).all()


def usage_by_type(db: Session, day: date) -> Dict[FeedType, float]:
    rows = (
        db.query(FeedInventory.feed_type, func.sum(FeedRecord.quantity_used))
        .join(FeedRecord, FeedRecord.inventory_id == FeedInventory.id)
        .filter(FeedRecord.date == day)
        .group_by(FeedInventory.feed_type)
        .all()
    )
    return {feed_type: float(total or 0) for feed_type, total in rows}
