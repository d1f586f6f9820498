from app.models.user import User
from app.models.property_settings import PropertyId, PropertySettings
from app.models.reservation import Reservation, OccupiedDay
from app.models.date_block import DateBlock
from app.models.activity_log import ActivityLog, ActionType
