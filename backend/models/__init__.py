from models.cattle import Cattle, CattleCategory, CattleStatus, Gender
from models.milk_record import MilkRecord, MilkQuality, MilkSession
from models.health_record import HealthRecord, HealthRecordType, HealthStatus, VaccinationType
from models.feed_inventory import FeedInventory, FeedType
from models.feed_record import FeedRecord
from models.users import User, UserRole
from models.daily_summary import DailySummary

__all__ = ['Cattle', 'CattleCategory', 'CattleStatus', 'DailySummary', 'FeedInventory', 'FeedRecord', 'FeedType', 'Gender', 'HealthRecord', 'HealthRecordType', 'HealthStatus', 'MilkQuality', 'MilkRecord', 'MilkSession', 'User', 'UserRole', 'VaccinationType',]
