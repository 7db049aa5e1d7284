"""Initial schema – users, lists, presets, notes, their access ledgers and tasks

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-17

Every resource table carries the same privacy columns (privacy,
password_hash, owner_id); every ledger is keyed by (user_id, <kind>_id).
"""

from alembic import op
import sqlalchemy as sa

# Alembic revision identifiers
revision = "0001_initial"
down_revision = None
branch_labels = None
depends_on = None

_PRIVACY = ("public", "private", "personal")

# (resource table, ledger table, ledger FK column, name unique?)
_KINDS = (
    ("lists", "user_list_access", "list_id", True),
    ("presets", "user_preset_access", "preset_id", True),
    ("notes", "user_note_access", "note_id", False),
)


def _resource_columns(unique_name: bool):
    return [
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False, unique=unique_name),
        sa.Column("color", sa.String(32), nullable=True),
        sa.Column("privacy", sa.Enum(*_PRIVACY, name="privacy_level"), nullable=True),
        # set only while privacy == 'private'
        sa.Column("password_hash", sa.String(255), nullable=True),
        # set only while privacy == 'personal'
        sa.Column(
            "owner_id",
            sa.String(36),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=True,
        ),
        sa.Column("order_position", sa.Integer(), nullable=False, server_default="0"),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
    ]


def _item_columns():
    return [
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("done", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("order_position", sa.Integer(), nullable=False, server_default="0"),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
    ]


def upgrade() -> None:
    # -- users ----------------------------------------------------------
    op.create_table(
        "users",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("username", sa.String(50), nullable=False, unique=True),
        sa.Column("email", sa.String(255), nullable=False, unique=True),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("settings", sa.JSON(), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
    )

    # -- resources + ledgers --------------------------------------------
    for table, ledger, fk_column, unique_name in _KINDS:
        columns = _resource_columns(unique_name)
        if table == "notes":
            columns += [
                sa.Column("content", sa.Text(), nullable=True),
                sa.Column("tags", sa.JSON(), nullable=True),
            ]
        op.create_table(table, *columns)
        op.create_index(f"idx_{table}_owner_id", table, ["owner_id"])

        op.create_table(
            ledger,
            sa.Column(
                "user_id",
                sa.String(36),
                sa.ForeignKey("users.id", ondelete="CASCADE"),
                primary_key=True,
            ),
            sa.Column(
                fk_column,
                sa.String(36),
                sa.ForeignKey(f"{table}.id", ondelete="CASCADE"),
                primary_key=True,
            ),
            sa.Column(
                "granted_at",
                sa.DateTime(timezone=True),
                server_default=sa.func.now(),
                nullable=False,
            ),
        )
        # revoke-all deletes by resource id
        op.create_index(f"idx_{ledger}_{fk_column}", ledger, [fk_column])

    # -- items inside lists / presets -----------------------------------
    op.create_table(
        "tasks",
        *_item_columns(),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column(
            "list_id",
            sa.String(36),
            sa.ForeignKey("lists.id", ondelete="CASCADE"),
            nullable=True,
        ),
        sa.Column("tags", sa.JSON(), nullable=True),
        sa.Column(
            "assignee_id",
            sa.String(36),
            sa.ForeignKey("users.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("due_date", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("idx_tasks_list_id", "tasks", ["list_id"])

    op.create_table(
        "preset_tasks",
        *_item_columns(),
        sa.Column("task_name", sa.String(255), nullable=False),
        sa.Column(
            "preset_id",
            sa.String(36),
            sa.ForeignKey("presets.id", ondelete="CASCADE"),
            nullable=False,
        ),
    )
    op.create_index("idx_preset_tasks_preset_id", "preset_tasks", ["preset_id"])


def downgrade() -> None:
    op.drop_index("idx_preset_tasks_preset_id", table_name="preset_tasks")
    op.drop_table("preset_tasks")
    op.drop_index("idx_tasks_list_id", table_name="tasks")
    op.drop_table("tasks")
    for table, ledger, fk_column, _ in reversed(_KINDS):
        op.drop_index(f"idx_{ledger}_{fk_column}", table_name=ledger)
        op.drop_table(ledger)
        op.drop_index(f"idx_{table}_owner_id", table_name=table)
        op.drop_table(table)
    op.drop_table("users")
