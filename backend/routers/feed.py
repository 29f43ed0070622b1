from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from starlette import status

import crud.feed as crud_feed
from database import get_db
from schemas.feed import (
    FeedCounts,
    FeedInventory as FeedInventorySchema,
    FeedInventoryCreate,
    FeedInventoryDetail,
    FeedInventoryUpdate,
    FeedRecord as FeedRecordSchema,
    FeedRecordWithInventory,
    FeedRestock,
    FeedStats,
    FeedUsageCreate,
)
from utils.auth_utils import RequestContext, get_current_user, get_user_identifier
from utils.dates import local_now
from utils.stats import days_until_restock, feed_inventory_stats, is_expiring_soon, stock_status

import logging
logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/feed", tags=["Feed"])


def _detail(item, usage, usage_count: int, now) -> FeedInventoryDetail:
    """Attach usage history and the derived stock indicators to an inventory item."""
    return FeedInventoryDetail(
        **FeedInventorySchema.model_validate(item).model_dump(),
        feed_records=[FeedRecordSchema.model_validate(r) for r in usage],
        counts=FeedCounts(feed_records=usage_count),
        stock_status=stock_status(item.quantity, item.min_threshold, item.expiry_date, now),
        days_until_restock=days_until_restock(item.quantity, item.min_threshold, [r.quantity_used for r in usage]),
        expiring_soon=is_expiring_soon(item.expiry_date, now),
    )


@router.get("", response_model=List[FeedInventoryDetail])
def get_feed_inventory(db: Session = Depends(get_db), ctx: RequestContext = Depends(get_current_user)):
    """Inventory items, newest first, each with its last 10 usage records."""
    items = crud_feed.get_all_feed_inventory(db)
    recent_usage = crud_feed.get_recent_usage(db)
    usage_counts = crud_feed.count_usage_records(db)
    now = local_now()
    return [_detail(item, recent_usage.get(item.id, []), usage_counts.get(item.id, 0), now) for item in items]


@router.get("/stats", response_model=FeedStats)
def get_feed_stats(db: Session = Depends(get_db), ctx: RequestContext = Depends(get_current_user)):
    items = crud_feed.get_all_feed_inventory(db)
    return FeedStats.model_validate(feed_inventory_stats(items, local_now()))


@router.post("", response_model=FeedInventorySchema, status_code=status.HTTP_201_CREATED)
def create_feed_inventory(
    feed: FeedInventoryCreate,
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(get_current_user),
):
    db_inventory = crud_feed.create_feed_inventory(db, feed)
    logger.info(
        f"Feed inventory {db_inventory.id} ({db_inventory.feed_type.value}, {db_inventory.quantity} {db_inventory.unit}) "
        f"created by user {get_user_identifier(ctx)}"
    )
    return db_inventory


@router.get("/usage", response_model=List[FeedRecordWithInventory])
def get_feed_usage(
    inventory_id: Optional[int] = Query(None, alias="inventoryId"),
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(get_current_user),
):
    """Most recent usage records (at most 100), newest first."""
    return crud_feed.get_feed_usage(db, inventory_id=inventory_id)


@router.post("/usage", response_model=FeedRecordWithInventory, status_code=status.HTTP_201_CREATED)
def record_feed_usage(
    usage: FeedUsageCreate,
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(get_current_user),
):
    db_record = crud_feed.record_feed_usage(db, usage)
    logger.info(
        f"{usage.quantity_used} used from feed inventory {usage.inventory_id}, "
        f"recorded by user {get_user_identifier(ctx)}"
    )
    return db_record


@router.post("/restock", response_model=FeedInventorySchema)
def restock_feed(
    restock: FeedRestock,
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(get_current_user),
):
    db_inventory = crud_feed.restock_feed(db, restock)
    logger.info(
        f"Feed inventory {restock.inventory_id} restocked with {restock.quantity_added} "
        f"by user {get_user_identifier(ctx)}"
    )
    return db_inventory


@router.get("/{inventory_id}", response_model=FeedInventoryDetail)
def get_feed_inventory_item(inventory_id: int, db: Session = Depends(get_db), ctx: RequestContext = Depends(get_current_user)):
    """A single inventory item with its full usage history."""
    item = crud_feed.get_feed_inventory(db, inventory_id)
    usage = crud_feed.get_usage_for_inventory(db, inventory_id)
    return _detail(item, usage, len(usage), local_now())


@router.put("/{inventory_id}", response_model=FeedInventorySchema)
def update_feed_inventory(
    inventory_id: int,
    feed: FeedInventoryUpdate,
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(get_current_user),
):
    db_inventory = crud_feed.update_feed_inventory(db, inventory_id, feed)
    logger.info(f"Feed inventory {inventory_id} updated by user {get_user_identifier(ctx)}")
    return db_inventory


@router.delete("/{inventory_id}")
def delete_feed_inventory(inventory_id: int, db: Session = Depends(get_db), ctx: RequestContext = Depends(get_current_user)):
    crud_feed.delete_feed_inventory(db, inventory_id)
    logger.info(f"Feed inventory {inventory_id} deleted by user {get_user_identifier(ctx)}")
    return {"success": True}
