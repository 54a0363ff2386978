"""Baseline: users, cases and reminder notifications.

Revision ID: 001_baseline
Revises: None
Create Date: 2026-10-19
"""

from collections.abc import Sequence

from alembic import op

revision: str = "001_baseline"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    # --- Users ---
    op.execute("""
        CREATE TABLE IF NOT EXISTS users (
            id SERIAL PRIMARY KEY,
            username VARCHAR(64) NOT NULL,
            email VARCHAR(320) UNIQUE NOT NULL,
            password_hash VARCHAR(256) NOT NULL,
            role VARCHAR(16) NOT NULL DEFAULT 'user',
            position VARCHAR(128),
            phone VARCHAR(32),
            office VARCHAR(128),
            avatar_url TEXT,
            created_at TIMESTAMP NOT NULL DEFAULT NOW()
        )
    """)

    # --- Cases ---
    op.execute("""
        CREATE TABLE IF NOT EXISTS cases (
            id SERIAL PRIMARY KEY,
            user_id INTEGER REFERENCES users(id) ON DELETE SET NULL,
            created_by INTEGER REFERENCES users(id) ON DELETE SET NULL,
            title VARCHAR(256) NOT NULL,
            date TIMESTAMP NOT NULL,
            type VARCHAR(64),
            description TEXT,
            parties TEXT,
            witnesses TEXT,
            prosecutor TEXT,
            status VARCHAR(64) NOT NULL DEFAULT 'Pending',
            notification_sent BOOLEAN NOT NULL DEFAULT false,
            created_at TIMESTAMP NOT NULL DEFAULT NOW(),
            updated_at TIMESTAMP
        )
    """)
    op.execute("""
        CREATE INDEX IF NOT EXISTS idx_cases_due
        ON cases(date, notification_sent)
    """)
    op.execute("""
        CREATE INDEX IF NOT EXISTS idx_cases_user
        ON cases(user_id)
    """)

    # --- Notifications ---
    op.execute("""
        CREATE TABLE IF NOT EXISTS notifications (
            id SERIAL PRIMARY KEY,
            user_id INTEGER NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            case_id INTEGER REFERENCES cases(id) ON DELETE CASCADE,
            message TEXT NOT NULL,
            is_read BOOLEAN NOT NULL DEFAULT false,
            is_sent BOOLEAN NOT NULL DEFAULT false,
            schedule_date TIMESTAMP,
            type VARCHAR(32) NOT NULL DEFAULT 'reminder',
            notify_date DATE NOT NULL,
            created_at TIMESTAMP NOT NULL DEFAULT NOW(),
            CONSTRAINT uq_notifications_case_user_day UNIQUE (case_id, user_id, notify_date)
        )
    """)
    op.execute("""
        CREATE INDEX IF NOT EXISTS idx_notifications_user_created
        ON notifications(user_id, created_at DESC)
    """)


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS notifications")
    op.execute("DROP TABLE IF EXISTS cases")
    op.execute("DROP TABLE IF EXISTS users")
