import sys
import os
import random
import logging
from datetime import datetime, timedelta
from dotenv import load_dotenv

load_dotenv()

# Add the parent directory to sys.path to allow imports from backend
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from database import Base, SessionLocal, engine
from models.cattle import Cattle, CattleCategory, CattleStatus, Gender
from models.daily_summary import DailySummary
from models.feed_inventory import FeedInventory, FeedType
from models.feed_record import FeedRecord
from models.health_record import HealthRecord, HealthRecordType, HealthStatus, VaccinationType
from models.milk_record import MilkQuality, MilkRecord, MilkSession
from models.users import User, UserRole
from tasks.daily_summary import build_daily_summary
from utils.auth_utils import hash_password
from utils.dates import local_now
from utils.stats import round_half_up

# Setup logging
logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')
logger = logging.getLogger("seed")

DEFAULT_PASSWORD = "password123"
HERD_SIZE = 50
HISTORY_DAYS = 150
HEALTH_RECORDS = 100

CATTLE_NAMES = [
    "Bella", "Daisy", "Molly", "Luna", "Lucy", "Maggie", "Sophie", "Chloe",
    "Max", "Charlie", "Buddy", "Rocky", "Jack", "Toby", "Duke", "Bear",
    "Rosie", "Penny", "Ginger", "Ruby", "Stella", "Lily", "Grace", "Emma",
]
BREEDS = [
    "Holstein", "Jersey", "Guernsey", "Ayrshire", "Brown Swiss",
    "Hereford", "Angus", "Charolais", "Simmental", "Limousin",
]
VETERINARIANS = [
    "Dr. Sarah Johnson", "Dr. Michael Chen", "Dr. Emily Rodriguez",
    "Dr. James Wilson", "Dr. Lisa Anderson",
]
SUPPLIERS = [
    "Green Pastures Feed Co.", "Farm Supply Depot", "AgriFeed Solutions",
    "Premium Livestock Nutrition", "Rural Feed & Grain",
]
USERS = [
    ("admin@cms.com", "Admin User", UserRole.ADMIN),
    ("manager@cms.com", "Farm Manager", UserRole.MANAGER),
    ("vet@cms.com", "Dr. Sarah Johnson", UserRole.VETERINARIAN),
    ("worker@cms.com", "Farm Worker", UserRole.WORKER),
]


def clear(db):
    for model in (FeedRecord, FeedInventory, MilkRecord, HealthRecord, DailySummary, Cattle, User):
        db.query(model).delete()
    db.commit()


def seed_users(db):
    hashed = hash_password(DEFAULT_PASSWORD)
    for email, name, role in USERS:
        db.add(User(email=email, name=name, role=role, hashed_password=hashed))
    db.commit()
    logger.info(f"Created {len(USERS)} users (password: {DEFAULT_PASSWORD})")


def _category(gender, age_years):
    if age_years < 1:
        return CattleCategory.CALF
    if gender == Gender.FEMALE:
        return CattleCategory.HEIFER if age_years < 2 else CattleCategory.COW
    return CattleCategory.STEER if random.randint(1, 10) <= 2 else CattleCategory.BULL


def seed_cattle(db, today):
    tags = set()
    while len(tags) < HERD_SIZE:
        tags.add(f"TAG-{random.randint(10000, 99999)}")

    herd = []
    for tag in sorted(tags):
        gender = random.choice([Gender.MALE, Gender.FEMALE])
        age_years = random.randint(0, 8)
        category = _category(gender, age_years)
        if category == CattleCategory.CALF:
            weight = random.uniform(30, 150)
        elif category == CattleCategory.HEIFER:
            weight = random.uniform(200, 400)
        else:
            weight = random.uniform(400, 800)
        animal = Cattle(
            tag_number=tag,
            name=random.choice(CATTLE_NAMES),
            gender=gender,
            breed=random.choice(BREEDS),
            date_of_birth=today.replace(year=today.year - age_years, month=random.randint(1, 12), day=random.randint(1, 28)),
            weight=round_half_up(weight, 1),
            status=random.choice([CattleStatus.ACTIVE] * 3 + [CattleStatus.QUARANTINED, CattleStatus.SOLD]),
            category=category,
        )
        db.add(animal)
        herd.append(animal)
    db.flush()

    calves = [c for c in herd if c.category == CattleCategory.CALF]
    cows = [c for c in herd if c.category == CattleCategory.COW and c.status == CattleStatus.ACTIVE]
    if cows:
        for calf in calves[:len(cows)]:
            calf.mother_id = random.choice(cows).id
    db.commit()
    logger.info(f"Created {len(herd)} cattle with relationships")
    return herd


def seed_health_records(db, herd, now):
    for _ in range(HEALTH_RECORDS):
        animal = random.choice(herd)
        record_type = random.choice(list(HealthRecordType))
        scheduled = now - timedelta(days=random.randint(0, 180))
        completed = random.random() > 0.3
        if completed:
            status = HealthStatus.COMPLETED
        else:
            # A handful of open records land in the coming week
            if random.random() < 0.5:
                scheduled = now + timedelta(days=random.randint(1, 14))
            status = HealthStatus.OVERDUE if scheduled < now else HealthStatus.PENDING
        db.add(HealthRecord(
            cattle_id=animal.id,
            record_type=record_type,
            vaccination_type=random.choice(list(VaccinationType)) if record_type == HealthRecordType.VACCINATION else None,
            description=f"{record_type.value} for {animal.name or animal.tag_number}",
            scheduled_date=scheduled,
            completed_date=scheduled + timedelta(days=random.randint(0, 7)) if completed else None,
            status=status,
            veterinarian=random.choice(VETERINARIANS),
            cost=round_half_up(random.uniform(50, 500), 2),
            notes=random.choice(["Routine procedure", "Follow-up required", "No complications", "Monitor for 48 hours", None]),
        ))
    db.commit()
    logger.info(f"Created {HEALTH_RECORDS} health records")


def seed_milk_records(db, herd, today):
    cows = [c for c in herd if c.category == CattleCategory.COW and c.status == CattleStatus.ACTIVE]
    count = 0
    for offset in range(HISTORY_DAYS):
        day = today - timedelta(days=offset)
        for cow in cows[:random.randint(min(15, len(cows)), len(cows))]:
            db.add(MilkRecord(
                cattle_id=cow.id,
                date=day,
                liters=round_half_up(random.uniform(8, 25), 1),
                session=random.choice(list(MilkSession)),
                quality=random.choice([MilkQuality.EXCELLENT, MilkQuality.GOOD, MilkQuality.GOOD, MilkQuality.FAIR, MilkQuality.POOR]),
                notes=random.choice(["Normal production", "Slightly below average", "Above average yield", None]),
            ))
            count += 1
    db.commit()
    logger.info(f"Created {count} milk records for the last {HISTORY_DAYS} days")


def seed_feed(db, now, today):
    inventories = []
    for feed_type in (FeedType.HAY, FeedType.CONCENTRATE, FeedType.SILAGE, FeedType.MINERAL_SUPPLEMENT, FeedType.GRAIN):
        quantity = random.uniform(500, 2000)
        last_restocked = now - timedelta(days=random.randint(0, 30))
        inventory = FeedInventory(
            feed_type=feed_type,
            quantity=round_half_up(quantity, 1),
            unit="kg",
            min_threshold=round_half_up(quantity * 0.2, 1),
            cost=round_half_up(random.uniform(1000, 5000), 2),
            supplier=random.choice(SUPPLIERS),
            last_restocked=last_restocked,
            expiry_date=last_restocked + timedelta(days=30 * random.randint(3, 12)),
        )
        db.add(inventory)
        inventories.append(inventory)
    db.flush()

    count = 0
    for offset in range(HISTORY_DAYS):
        day = today - timedelta(days=offset)
        for inventory in inventories:
            if random.random() > 0.3:
                used = round_half_up(random.uniform(50, 200), 1)
                db.add(FeedRecord(
                    inventory_id=inventory.id,
                    date=day,
                    quantity_used=used,
                    notes=random.choice(["Daily feeding", "Extra ration for pregnant cows", "Regular distribution", None]),
                ))
                # Historical usage may exceed what is on hand; stock never goes below zero
                inventory.quantity = max(0.0, round_half_up(inventory.quantity - used, 1))
                count += 1
    db.commit()
    logger.info(f"Created {len(inventories)} feed inventory items and {count} usage records")


def seed_daily_summaries(db, today):
    for offset in range(HISTORY_DAYS):
        build_daily_summary(db, today - timedelta(days=offset))
    logger.info(f"Created daily summaries for the last {HISTORY_DAYS} days")


def seed():
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    now = local_now()
    today = now.date()
    try:
        logger.info("Clearing existing data...")
        clear(db)
        seed_users(db)
        herd = seed_cattle(db, today)
        seed_health_records(db, herd, now)
        seed_milk_records(db, herd, today)
        seed_feed(db, now, today)
        seed_daily_summaries(db, today)
        logger.info("Database seeding completed successfully")
    except Exception:
        db.rollback()
        logger.exception("Error seeding database")
        raise
    finally:
        db.close()


if __name__ == "__main__":
    seed()
