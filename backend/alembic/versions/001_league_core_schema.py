"""League core schema: players, leagues, seasons, fixtures, matches, disputes

Revision ID: 001_league_core
Revises:
Create Date: 2026-10-19 00:00:00.000000

"""

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision = "001_league_core"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "player",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("display_name", sa.String(), nullable=False),
        sa.Column("email", sa.String(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_player_email", "player", ["email"])

    op.create_table(
        "league",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("game_type", sa.String(), nullable=False),
        sa.Column("description", sa.String(), nullable=True),
        sa.Column("created_by", sa.Integer(), nullable=False),
        sa.Column("status", sa.String(), nullable=False, server_default="active"),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["created_by"], ["player.id"]),
    )

    op.create_table(
        "leaguemember",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("league_id", sa.Integer(), nullable=False),
        sa.Column("player_id", sa.Integer(), nullable=False),
        sa.Column("role", sa.String(), nullable=False, server_default="member"),
        sa.Column("status", sa.String(), nullable=False, server_default="active"),
        sa.Column("joined_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["league_id"], ["league.id"]),
        sa.ForeignKeyConstraint(["player_id"], ["player.id"]),
        sa.UniqueConstraint("league_id", "player_id", name="uq_leaguemember_league_player"),
    )
    op.create_index("ix_leaguemember_league_id", "leaguemember", ["league_id"])
    op.create_index("ix_leaguemember_player_id", "leaguemember", ["player_id"])

    op.create_table(
        "season",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("league_id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("description", sa.String(), nullable=True),
        sa.Column("season_number", sa.Integer(), nullable=False),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("end_date", sa.Date(), nullable=True),
        sa.Column("status", sa.String(), nullable=False, server_default="upcoming"),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["league_id"], ["league.id"]),
        sa.UniqueConstraint("league_id", "season_number", name="uq_season_league_number"),
    )
    op.create_index("ix_season_league_id", "season", ["league_id"])

    op.create_table(
        "fixture",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("league_id", sa.Integer(), nullable=False),
        sa.Column("season_id", sa.Integer(), nullable=True),
        sa.Column("round_index", sa.Integer(), nullable=False),
        sa.Column("sequence_in_round", sa.Integer(), nullable=False),
        sa.Column("home_player_id", sa.Integer(), nullable=False),
        sa.Column("away_player_id", sa.Integer(), nullable=False),
        sa.Column("scheduled_date", sa.DateTime(), nullable=False),
        sa.Column("submission_deadline", sa.DateTime(), nullable=False),
        sa.Column("status", sa.String(), nullable=False, server_default="pending"),
        sa.Column("match_id", sa.Integer(), nullable=True),
        sa.Column("winner_id", sa.Integer(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["league_id"], ["league.id"]),
        sa.ForeignKeyConstraint(["season_id"], ["season.id"]),
        sa.ForeignKeyConstraint(["home_player_id"], ["player.id"]),
        sa.ForeignKeyConstraint(["away_player_id"], ["player.id"]),
        sa.ForeignKeyConstraint(["winner_id"], ["player.id"]),
        sa.UniqueConstraint("season_id", "round_index", "sequence_in_round", name="uq_fixture_season_round_seq"),
    )
    op.create_index("ix_fixture_league_id", "fixture", ["league_id"])
    op.create_index("ix_fixture_season_id", "fixture", ["season_id"])

    op.create_table(
        "match",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("league_id", sa.Integer(), nullable=False),
        sa.Column("fixture_id", sa.Integer(), nullable=True),
        sa.Column("match_date", sa.DateTime(), nullable=False),
        sa.Column("recorded_by", sa.Integer(), nullable=False),
        sa.Column("status", sa.String(), nullable=False, server_default="completed"),
        sa.Column("is_disputed", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("disputed_by", sa.Integer(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["league_id"], ["league.id"]),
        sa.ForeignKeyConstraint(["fixture_id"], ["fixture.id"]),
        sa.ForeignKeyConstraint(["recorded_by"], ["player.id"]),
        sa.ForeignKeyConstraint(["disputed_by"], ["player.id"]),
    )
    op.create_index("ix_match_league_id", "match", ["league_id"])

    op.create_table(
        "matchparticipant",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("match_id", sa.Integer(), nullable=False),
        sa.Column("player_id", sa.Integer(), nullable=False),
        sa.Column("score", sa.Integer(), nullable=False),
        sa.Column("result", sa.String(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["match_id"], ["match.id"]),
        sa.ForeignKeyConstraint(["player_id"], ["player.id"]),
        sa.UniqueConstraint("match_id", "player_id", name="uq_matchparticipant_match_player"),
    )
    op.create_index("ix_matchparticipant_match_id", "matchparticipant", ["match_id"])

    op.create_table(
        "dispute",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("match_id", sa.Integer(), nullable=False),
        sa.Column("disputed_by", sa.Integer(), nullable=False),
        sa.Column("reason", sa.String(), nullable=False),
        sa.Column("proposed_scores", sa.JSON(), nullable=True),
        sa.Column("status", sa.String(), nullable=False, server_default="open"),
        sa.Column("resolution", sa.String(), nullable=True),
        sa.Column("resolution_scores", sa.JSON(), nullable=True),
        sa.Column("resolved_by", sa.Integer(), nullable=True),
        sa.Column("resolved_at", sa.DateTime(), nullable=True),
        sa.Column("resolution_notes", sa.String(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["match_id"], ["match.id"]),
        sa.ForeignKeyConstraint(["disputed_by"], ["player.id"]),
        sa.ForeignKeyConstraint(["resolved_by"], ["player.id"]),
    )
    op.create_index("ix_dispute_match_id", "dispute", ["match_id"])
    # At most one open dispute per match
    op.create_index(
        "uq_dispute_open_match",
        "dispute",
        ["match_id"],
        unique=True,
        sqlite_where=sa.text("status = 'open'"),
        postgresql_where=sa.text("status = 'open'"),
    )


def downgrade() -> None:
    op.drop_index("uq_dispute_open_match", table_name="dispute")
    op.drop_index("ix_dispute_match_id", table_name="dispute")
    op.drop_table("dispute")
    op.drop_index("ix_matchparticipant_match_id", table_name="matchparticipant")
    op.drop_table("matchparticipant")
    op.drop_index("ix_match_league_id", table_name="match")
    op.drop_table("match")
    op.drop_index("ix_fixture_season_id", table_name="fixture")
    op.drop_index("ix_fixture_league_id", table_name="fixture")
    op.drop_table("fixture")
    op.drop_index("ix_season_league_id", table_name="season")
    op.drop_table("season")
    op.drop_index("ix_leaguemember_player_id", table_name="leaguemember")
    op.drop_index("ix_leaguemember_league_id", table_name="leaguemember")
    op.drop_table("leaguemember")
    op.drop_table("league")
    op.drop_index("ix_player_email", table_name="player")
    op.drop_table("player")
