# backend/app/db/models/__init__.py

from app.db.models.medication import Medication
from app.db.models.movement import MOVEMENT_KINDS, Movement
