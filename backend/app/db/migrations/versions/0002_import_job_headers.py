"""import job headers and parse errors

Revision ID: 0002_import_job_headers
Revises: 0001_init
Create Date: 2026-10-17

"""
from alembic import op
import sqlalchemy as sa

revision = "0002_import_job_headers"
down_revision = "0001_init"
branch_labels = None
depends_on = None

def upgrade():
    op.add_column("import_job", sa.Column("headers", sa.JSON(), nullable=True))
    op.add_column("import_job", sa.Column("parse_errors", sa.JSON(), nullable=True))

def downgrade():
    op.drop_column("import_job", "parse_errors")
    op.drop_column("import_job", "headers")
