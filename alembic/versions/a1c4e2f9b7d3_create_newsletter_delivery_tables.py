"""Create newsletter delivery tables

Revision ID: a1c4e2f9b7d3
Revises:
Create Date: 2026-10-19

"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "a1c4e2f9b7d3"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        "subscriptions",
        sa.Column("id", sa.UUID(), nullable=False),
        sa.Column("email", sa.Text(), nullable=False),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("status", sa.String(length=32), nullable=False),
        sa.Column("subscribed_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_subscriptions"),
        sa.UniqueConstraint("email", name="uq_subscriptions_email"),
    )
    op.create_index("idx_subscriptions_status", "subscriptions", ["status"], unique=False)

    op.create_table(
        "newsletter_issues",
        sa.Column("newsletter_issue_id", sa.UUID(), nullable=False),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("published_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("newsletter_issue_id", name="pk_newsletter_issues"),
    )

    op.create_table(
        "issue_delivery_queue",
        sa.Column("newsletter_issue_id", sa.UUID(), nullable=False),
        sa.Column("subscriber_email", sa.Text(), nullable=False),
        sa.ForeignKeyConstraint(
            ["newsletter_issue_id"],
            ["newsletter_issues.newsletter_issue_id"],
            name="fk_issue_delivery_queue_newsletter_issue_id_newsletter_issues",
        ),
        sa.PrimaryKeyConstraint(
            "newsletter_issue_id", "subscriber_email", name="pk_issue_delivery_queue"
        ),
    )

    op.create_table(
        "idempotency",
        sa.Column("user_id", sa.UUID(), nullable=False),
        sa.Column("idempotency_key", sa.String(length=50), nullable=False),
        sa.Column("response_status_code", sa.SmallInteger(), nullable=True),
        sa.Column("response_headers", postgresql.JSONB(), nullable=True),
        sa.Column("response_body", sa.LargeBinary(), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("user_id", "idempotency_key", name="pk_idempotency"),
    )


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_table("idempotency")
    op.drop_table("issue_delivery_queue")
    op.drop_table("newsletter_issues")
    op.drop_index("idx_subscriptions_status", table_name="subscriptions")
    op.drop_table("subscriptions")
