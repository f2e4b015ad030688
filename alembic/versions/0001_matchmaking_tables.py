"""matchmaking tables

Revision ID: 0001
Revises:
Create Date: 2026-10-19 10:00:00

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "0001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "user_profiles",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("is_bride", sa.Boolean(), nullable=False),
        sa.Column("full_name", sa.String(length=200), nullable=False),
        sa.Column("phone", sa.String(length=20), nullable=True),
        sa.Column("email", sa.String(length=255), nullable=True),
        sa.Column("date_of_birth", sa.Date(), nullable=True),
        sa.Column("height_cm", sa.Integer(), nullable=True),
        sa.Column("physically_challenged", sa.Boolean(), nullable=False),
        sa.Column("community", sa.String(length=50), nullable=False),
        sa.Column("marital_status", sa.String(length=50), nullable=False),
        sa.Column("profession", sa.String(length=50), nullable=False),
        sa.Column("profession_type", sa.String(length=50), nullable=False),
        sa.Column("highest_education_level", sa.String(length=50), nullable=False),
        sa.Column("home_district", sa.String(length=50), nullable=False),
        sa.Column("profile_picture_url", sa.String(length=255), nullable=True),
        sa.Column("last_login", sa.DateTime(timezone=True), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("is_deleted", sa.Boolean(), nullable=False),
        sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True),
        sa.CheckConstraint(
            "height_cm IS NULL OR (height_cm >= 130 AND height_cm <= 220)", name="height_range_check"
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_user_profiles_id"), "user_profiles", ["id"], unique=False)
    op.create_index(op.f("ix_user_profiles_user_id"), "user_profiles", ["user_id"], unique=True)

    op.create_table(
        "partner_preferences",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("user_profile_id", sa.Integer(), nullable=False),
        sa.Column("min_age_years", sa.Integer(), nullable=True),
        sa.Column("max_age_years", sa.Integer(), nullable=True),
        sa.Column("min_height_cm", sa.Integer(), nullable=True),
        sa.Column("max_height_cm", sa.Integer(), nullable=True),
        sa.Column("accept_physically_challenged", sa.Boolean(), nullable=False),
        sa.Column("preferred_communities", sa.JSON(), nullable=False),
        sa.Column("preferred_marital_status", sa.JSON(), nullable=False),
        sa.Column("preferred_professions", sa.JSON(), nullable=False),
        sa.Column("preferred_profession_types", sa.JSON(), nullable=False),
        sa.Column("preferred_education_levels", sa.JSON(), nullable=False),
        sa.Column("preferred_home_districts", sa.JSON(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("is_deleted", sa.Boolean(), nullable=False),
        sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True),
        sa.CheckConstraint(
            "min_age_years IS NULL OR max_age_years IS NULL OR min_age_years <= max_age_years",
            name="age_range_check",
        ),
        sa.CheckConstraint(
            "min_height_cm IS NULL OR max_height_cm IS NULL OR min_height_cm <= max_height_cm",
            name="height_pref_range_check",
        ),
        sa.ForeignKeyConstraint(["user_profile_id"], ["user_profiles.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        op.f("ix_partner_preferences_user_profile_id"), "partner_preferences", ["user_profile_id"], unique=True
    )

    op.create_table(
        "profile_matches",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("target_id", sa.Uuid(), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("is_deleted", sa.Boolean(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id", "target_id", name="unique_profile_match"),
    )
    op.create_index(op.f("ix_profile_matches_user_id"), "profile_matches", ["user_id"], unique=False)
    op.create_index(op.f("ix_profile_matches_target_id"), "profile_matches", ["target_id"], unique=False)
    op.create_index(op.f("ix_profile_matches_status"), "profile_matches", ["status"], unique=False)

    op.create_table(
        "mutual_matches",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("user_id_1", sa.Uuid(), nullable=False),
        sa.Column("user_id_2", sa.Uuid(), nullable=False),
        sa.Column("matched_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("user_1_confirmed", sa.Boolean(), nullable=False),
        sa.Column("user_2_confirmed", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("is_deleted", sa.Boolean(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id_1", "user_id_2", name="unique_mutual_match"),
    )
    op.create_index(op.f("ix_mutual_matches_user_id_1"), "mutual_matches", ["user_id_1"], unique=False)
    op.create_index(op.f("ix_mutual_matches_user_id_2"), "mutual_matches", ["user_id_2"], unique=False)
    op.create_index(op.f("ix_mutual_matches_is_active"), "mutual_matches", ["is_active"], unique=False)


def downgrade() -> None:
    op.drop_index(op.f("ix_mutual_matches_is_active"), table_name="mutual_matches")
    op.drop_index(op.f("ix_mutual_matches_user_id_2"), table_name="mutual_matches")
    op.drop_index(op.f("ix_mutual_matches_user_id_1"), table_name="mutual_matches")
    op.drop_table("mutual_matches")
    op.drop_index(op.f("ix_profile_matches_status"), table_name="profile_matches")
    op.drop_index(op.f("ix_profile_matches_target_id"), table_name="profile_matches")
    op.drop_index(op.f("ix_profile_matches_user_id"), table_name="profile_matches")
    op.drop_table("profile_matches")
    op.drop_index(op.f("ix_partner_preferences_user_profile_id"), table_name="partner_preferences")
    op.drop_table("partner_preferences")
    op.drop_index(op.f("ix_user_profiles_user_id"), table_name="user_profiles")
    op.drop_index(op.f("ix_user_profiles_id"), table_name="user_profiles")
    op.drop_table("user_profiles")
