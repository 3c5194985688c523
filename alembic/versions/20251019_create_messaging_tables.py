"""Create user, conversation, message and notification tables

Revision ID: 20251019_create_messaging_tables
Revises:
Create Date: 2025-10-19 10:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "20251019_create_messaging_tables"
down_revision = None
branch_labels = None
depends_on = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.text("NOW()"),
        ),
        sa.Column(
            "updated_at",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.text("NOW()"),
        ),
    ]


def upgrade() -> None:
    user_role = sa.Enum("ADMIN", "STAFF", "STUDENT", name="user_role")
    conversation_status = sa.Enum("PENDING", "ACCEPTED", name="conversation_status")

    op.create_table(
        "user",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("email", sa.String(255), nullable=False, unique=True),
        sa.Column("role", user_role, nullable=False),
        *_timestamps(),
    )
    op.create_index("idx_user_role", "user", ["role"])

    op.create_table(
        "conversation",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("participant_low_id", sa.String(36), sa.ForeignKey("user.id"), nullable=False),
        sa.Column("participant_high_id", sa.String(36), sa.ForeignKey("user.id"), nullable=False),
        sa.Column("initiator_id", sa.String(36), sa.ForeignKey("user.id"), nullable=False),
        sa.Column("status", conversation_status, nullable=False),
        sa.Column(
            "last_activity_at",
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.text("NOW()"),
        ),
        *_timestamps(),
        # Unordered-pair key: at most one conversation per two users
        sa.UniqueConstraint(
            "participant_low_id", "participant_high_id", name="uq_conversation_pair"
        ),
    )
    op.create_index("idx_conversation_low", "conversation", ["participant_low_id"])
    op.create_index("idx_conversation_high", "conversation", ["participant_high_id"])
    op.create_index("idx_conversation_last_activity", "conversation", ["last_activity_at"])

    op.create_table(
        "message",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("conversation_id", sa.String(36), sa.ForeignKey("conversation.id"), nullable=False),
        sa.Column("sender_id", sa.String(36), sa.ForeignKey("user.id"), nullable=False),
        sa.Column("receiver_id", sa.String(36), sa.ForeignKey("user.id"), nullable=False),
        sa.Column("content", sa.Text, nullable=False),
        *_timestamps(),
    )
    op.create_index(
        "idx_message_conversation_created", "message", ["conversation_id", "created_at"]
    )

    op.create_table(
        "notification",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("user_id", sa.String(36), sa.ForeignKey("user.id"), nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("message", sa.Text, nullable=False),
        sa.Column("type", sa.String(50), nullable=False),
        sa.Column("read", sa.Boolean, nullable=False, server_default=sa.false()),
        *_timestamps(),
    )
    op.create_index("idx_notification_user_read", "notification", ["user_id", "read"])


def downgrade() -> None:
    op.drop_index("idx_notification_user_read", table_name="notification")
    op.drop_table("notification")

    op.drop_index("idx_message_conversation_created", table_name="message")
    op.drop_table("message")

    op.drop_index("idx_conversation_last_activity", table_name="conversation")
    op.drop_index("idx_conversation_high", table_name="conversation")
    op.drop_index("idx_conversation_low", table_name="conversation")
    op.drop_table("conversation")

    op.drop_index("idx_user_role", table_name="user")
    op.drop_table("user")

    sa.Enum(name="conversation_status").drop(op.get_bind(), checkfirst=True)
    sa.Enum(name="user_role").drop(op.get_bind(), checkfirst=True)
