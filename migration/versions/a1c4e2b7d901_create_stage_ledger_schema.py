"""create stage ledger schema

Revision ID: a1c4e2b7d901
Revises:
Create Date: 2026-10-19
"""

from alembic import op
import sqlalchemy as sa


revision = "a1c4e2b7d901"
down_revision = None
branch_labels = None
depends_on = None

_LEDGER_STATUS = ("PENDING", "PAID", "RECEIVED", "CANCELED", "DELETED")
_TX_TYPE = ("INCOME", "EXPENSE")
_TX_STATUS = ("PENDING", "PAID", "RECEIVED", "CANCELED")
_INTERVAL = ("DAILY", "WEEKLY", "MONTHLY", "YEARLY")


def _ledger_columns(extra: sa.Column) -> list:
    return [
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("description", sa.String(), nullable=False),
        sa.Column("amount", sa.Numeric(14, 2), nullable=False),
        sa.Column("due_date", sa.Date(), nullable=False),
        sa.Column("payment_date", sa.Date(), nullable=True),
        sa.Column("status", sa.Enum(*_LEDGER_STATUS, name="ledgerstatus"), nullable=False),
        sa.Column("stage_id", sa.String(), nullable=True),
        sa.Column("project_id", sa.String(), nullable=True),
        sa.Column("manual_transaction_id", sa.String(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        extra,
        sa.PrimaryKeyConstraint("id"),
    ]


def upgrade() -> None:
    op.create_table(
        "projects",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("status", sa.String(), nullable=False),
        sa.Column("main_consultant_id", sa.String(), nullable=True),
        sa.Column("support_consultant_id", sa.String(), nullable=True),
        sa.Column("client_id", sa.String(), nullable=True),
        sa.Column("total_value", sa.Numeric(14, 2), nullable=False, server_default=sa.text("0")),
        sa.Column("tax_percent", sa.Numeric(7, 4), nullable=False, server_default=sa.text("0")),
        sa.Column("third_party_expenses", sa.Numeric(14, 2), nullable=False, server_default=sa.text("0")),
        sa.Column("main_consultant_value", sa.Numeric(14, 2), nullable=False, server_default=sa.text("0")),
        sa.Column("support_consultant_value", sa.Numeric(14, 2), nullable=True),
        sa.Column("version", sa.Integer(), nullable=False, server_default=sa.text("1")),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_table(
        "project_stages",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("project_id", sa.String(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("status", sa.String(), nullable=False),
        sa.Column("stage_order", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("value", sa.Numeric(14, 2), nullable=False, server_default=sa.text("0")),
        sa.Column("start_date", sa.Date(), nullable=True),
        sa.Column("end_date", sa.Date(), nullable=True),
        sa.Column("description", sa.String(), nullable=True),
        sa.Column("consultant_id", sa.String(), nullable=True),
        sa.Column("consultant_value", sa.Numeric(14, 2), nullable=True),
        sa.Column("completed", sa.Boolean(), nullable=False, server_default=sa.text("0")),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("client_approved", sa.Boolean(), nullable=False, server_default=sa.text("0")),
        sa.Column("invoice_issued", sa.Boolean(), nullable=False, server_default=sa.text("0")),
        sa.Column("payment_received", sa.Boolean(), nullable=False, server_default=sa.text("0")),
        sa.Column("consultants_settled", sa.Boolean(), nullable=False, server_default=sa.text("0")),
        sa.Column("consultant_paid", sa.Boolean(), nullable=False, server_default=sa.text("0")),
        sa.ForeignKeyConstraint(["project_id"], ["projects.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "idx_project_stages_project_order", "project_stages", ["project_id", "stage_order"], unique=False
    )
    op.create_index("idx_project_stages_status", "project_stages", ["status"], unique=False)

    op.create_table(
        "stage_history",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("stage_id", sa.String(), nullable=False),
        sa.Column("project_id", sa.String(), nullable=False),
        sa.Column("status", sa.String(), nullable=False),
        sa.Column("previous_status", sa.String(), nullable=True),
        sa.Column("changed_by", sa.String(), nullable=False, server_default=sa.text("'Sistema'")),
        sa.Column("changed_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["stage_id"], ["project_stages.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("idx_stage_history_stage", "stage_history", ["stage_id", "changed_at"], unique=False)
    op.create_index("idx_stage_history_project", "stage_history", ["project_id", "changed_at"], unique=False)

    op.create_table(
        "status_definitions",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("display_name", sa.String(), nullable=False),
        sa.Column("color", sa.String(length=16), nullable=False, server_default=sa.text("'#6b7280'")),
        sa.Column("is_completion_status", sa.Boolean(), nullable=False, server_default=sa.text("0")),
        sa.Column("is_cancellation_status", sa.Boolean(), nullable=False, server_default=sa.text("0")),
        sa.Column("order_index", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("name"),
    )

    op.create_table(
        "manual_transactions",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("type", sa.Enum(*_TX_TYPE, name="transactiontype"), nullable=False),
        sa.Column("description", sa.String(), nullable=False),
        sa.Column("amount", sa.Numeric(14, 2), nullable=False),
        sa.Column("due_date", sa.Date(), nullable=False),
        sa.Column("status", sa.Enum(*_TX_STATUS, name="transactionstatus"), nullable=False),
        sa.Column("payment_date", sa.Date(), nullable=True),
        sa.Column("client_id", sa.String(), nullable=True),
        sa.Column("consultant_id", sa.String(), nullable=True),
        sa.Column("project_id", sa.String(), nullable=True),
        sa.Column("is_recurring", sa.Boolean(), nullable=False, server_default=sa.text("0")),
        sa.Column("recurrence_interval", sa.Enum(*_INTERVAL, name="recurrenceinterval"), nullable=True),
        sa.Column("installments", sa.Integer(), nullable=True),
        sa.Column("current_installment", sa.Integer(), nullable=True),
        sa.Column("recurrence_tag", sa.String(), nullable=False, server_default=sa.text("'unique'")),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("idx_manual_transactions_due", "manual_transactions", ["due_date"], unique=False)

    op.create_table(
        "accounts_payable",
        *_ledger_columns(sa.Column("consultant_id", sa.String(), nullable=True)),
    )
    op.create_index("ux_accounts_payable_stage", "accounts_payable", ["stage_id"], unique=True)
    op.create_index(
        "ux_accounts_payable_transaction", "accounts_payable", ["manual_transaction_id"], unique=True
    )
    op.create_index("idx_accounts_payable_due", "accounts_payable", ["due_date"], unique=False)

    op.create_table(
        "accounts_receivable",
        *_ledger_columns(sa.Column("client_id", sa.String(), nullable=True)),
    )
    op.create_index("ux_accounts_receivable_stage", "accounts_receivable", ["stage_id"], unique=True)
    op.create_index(
        "ux_accounts_receivable_transaction", "accounts_receivable", ["manual_transaction_id"], unique=True
    )
    op.create_index("idx_accounts_receivable_due", "accounts_receivable", ["due_date"], unique=False)

    op.create_table(
        "audit_logs",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("occurred_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("actor_name", sa.String(), nullable=True),
        sa.Column("action", sa.String(), nullable=False),
        sa.Column("entity_type", sa.String(), nullable=False),
        sa.Column("entity_id", sa.String(), nullable=False),
        sa.Column("project_id", sa.String(), nullable=True),
        sa.Column("details_json", sa.Text(), nullable=False, server_default=sa.text("'{}'")),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("idx_audit_logs_occurred", "audit_logs", ["occurred_at"], unique=False)
    op.create_index("idx_audit_logs_project", "audit_logs", ["project_id"], unique=False)
    op.create_index("idx_audit_logs_entity", "audit_logs", ["entity_type", "entity_id"], unique=False)


def downgrade() -> None:
    op.drop_index("idx_audit_logs_entity", table_name="audit_logs")
    op.drop_index("idx_audit_logs_project", table_name="audit_logs")
    op.drop_index("idx_audit_logs_occurred", table_name="audit_logs")
    op.drop_table("audit_logs")
    for table in ("accounts_receivable", "accounts_payable"):
        op.drop_index(f"idx_{table}_due", table_name=table)
        op.drop_index(f"ux_{table}_transaction", table_name=table)
        op.drop_index(f"ux_{table}_stage", table_name=table)
        op.drop_table(table)
    op.drop_index("idx_manual_transactions_due", table_name="manual_transactions")
    op.drop_table("manual_transactions")
    op.drop_table("status_definitions")
    op.drop_index("idx_stage_history_project", table_name="stage_history")
    op.drop_index("idx_stage_history_stage", table_name="stage_history")
    op.drop_table("stage_history")
    op.drop_index("idx_project_stages_status", table_name="project_stages")
    op.drop_index("idx_project_stages_project_order", table_name="project_stages")
    op.drop_table("project_stages")
    op.drop_table("projects")
