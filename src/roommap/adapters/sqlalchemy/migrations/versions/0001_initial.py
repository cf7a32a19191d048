"""Initial room mapping schema.

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-18
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

revision = "0001_initial"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "hotel_mapping",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("source", sa.String(), nullable=False),
        sa.Column("source_id", sa.String(), nullable=False),
        sa.Column("hotel_id", sa.String(), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_hotel_mapping"),
        sa.UniqueConstraint("source", "source_id", name="uq_hotel_mapping_identity"),
    )

    op.create_table(
        "room",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("hotel_id", sa.String(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("description", sa.String(), nullable=True),
        sa.Column("max_occupancy", sa.Integer(), nullable=False),
        sa.Column("photos", sa.JSON(), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_room"),
        sa.UniqueConstraint("hotel_id", "name", name="uq_room_hotel_name"),
    )

    op.create_table(
        "room_mapping",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("room_id", sa.Uuid(), nullable=False),
        sa.Column("hotel_mapping_id", sa.Uuid(), nullable=False),
        sa.Column("source", sa.String(), nullable=False),
        sa.Column("source_id", sa.String(), nullable=False),
        sa.Column("source_data", sa.Text(), nullable=True),
        sa.Column("confidence", sa.Float(), nullable=False),
        sa.Column(
            "mapping_type",
            sa.Enum("AUTOMATIC", "MANUAL", "VERIFIED", name="mappingtype", native_enum=False),
            nullable=False,
        ),
        sa.Column("is_primary", sa.Boolean(), nullable=False),
        sa.Column("last_synced_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("quality_score", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(
            ["room_id"],
            ["room.id"],
            name="fk_room_mapping_room_id_room",
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["hotel_mapping_id"],
            ["hotel_mapping.id"],
            name="fk_room_mapping_hotel_mapping_id_hotel_mapping",
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id", name="pk_room_mapping"),
        sa.UniqueConstraint(
            "source",
            "source_id",
            "hotel_mapping_id",
            name="uq_room_mapping_identity",
        ),
    )
    op.create_index("ix_room_mapping_room", "room_mapping", ["room_id"])

    op.create_table(
        "room_content_enrichment",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("room_id", sa.Uuid(), nullable=False),
        sa.Column("source", sa.String(), nullable=False),
        sa.Column("field_name", sa.String(), nullable=False),
        sa.Column("content", sa.JSON(), nullable=False),
        sa.Column(
            "quality",
            sa.Enum("PENDING", "APPROVED", name="enrichmentquality", native_enum=False),
            nullable=False,
        ),
        sa.Column("enriched_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(
            ["room_id"],
            ["room.id"],
            name="fk_room_content_enrichment_room_id_room",
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id", name="pk_room_content_enrichment"),
        sa.UniqueConstraint(
            "room_id",
            "source",
            "field_name",
            name="uq_room_content_enrichment_key",
        ),
    )

    op.create_table(
        "mapping_conflict",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column(
            "entity_type",
            sa.Enum("ROOM", name="entitytype", native_enum=False),
            nullable=False,
        ),
        sa.Column("entity_id", sa.Uuid(), nullable=False),
        sa.Column("field_name", sa.String(), nullable=False),
        sa.Column("conflicting_sources", sa.Text(), nullable=False),
        sa.Column(
            "status",
            sa.Enum("OPEN", "RESOLVED", name="conflictstatus", native_enum=False),
            nullable=False,
        ),
        sa.Column(
            "resolution",
            sa.Enum(
                "KEEP_INTERNAL",
                "APPLY_SOURCE",
                name="conflictresolution",
                native_enum=False,
            ),
            nullable=True,
        ),
        sa.Column("detected_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("resolved_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id", name="pk_mapping_conflict"),
    )
    op.create_index(
        "ix_mapping_conflict_status",
        "mapping_conflict",
        ["status", "detected_at"],
    )
    op.create_index(
        "uq_mapping_conflict_open",
        "mapping_conflict",
        ["entity_type", "entity_id", "field_name"],
        unique=True,
        sqlite_where=sa.text("status = 'OPEN'"),
        postgresql_where=sa.text("status = 'OPEN'"),
    )


def downgrade() -> None:
    op.drop_index("uq_mapping_conflict_open", table_name="mapping_conflict")
    op.drop_index("ix_mapping_conflict_status", table_name="mapping_conflict")
    op.drop_table("mapping_conflict")
    op.drop_table("room_content_enrichment")
    op.drop_index("ix_room_mapping_room", table_name="room_mapping")
    op.drop_table("room_mapping")
    op.drop_table("room")
    op.drop_table("hotel_mapping")
