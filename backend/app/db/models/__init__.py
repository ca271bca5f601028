# import all models for Alembic
from app.db.models.user import User
from app.db.models.import_job import ImportJob
from app.db.models.import_item import ImportItem
