"""Initial schema: games, teams, players, matches, sms_log

Revision ID: 001_initial
Revises:
Create Date: 2025-11-10 00:00:00.000000

"""

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision = "001_initial"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    # Create game table
    op.create_table(
        "game",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("title", sa.String(), nullable=False),
        sa.Column("scheduled_at", sa.DateTime(), nullable=False),
        sa.Column("venue_name", sa.String(), nullable=False),
        sa.Column("address", sa.String(), nullable=False),
        sa.Column("maps_link", sa.String(), nullable=False),
        sa.Column("description", sa.String(), nullable=False),
        sa.Column("price_per_player", sa.Integer(), nullable=False),
        sa.Column("max_players_per_team", sa.Integer(), nullable=False),
        sa.Column("status", sa.String(), nullable=False, server_default="upcoming"),
        sa.Column("gallery_links", sa.JSON(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )

    # Create team table
    op.create_table(
        "team",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("game_id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["game_id"], ["game.id"]),
        sa.UniqueConstraint("game_id", "name", name="uq_game_team_name"),
    )
    op.create_index("ix_team_game_id", "team", ["game_id"])

    # Create player table
    op.create_table(
        "player",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("game_id", sa.Integer(), nullable=False),
        sa.Column("team_id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("contact", sa.String(), nullable=False),
        sa.Column("proof_file_name", sa.String(), nullable=False),
        sa.Column("proof_file_type", sa.String(), nullable=False),
        sa.Column("proof_file_url", sa.String(), nullable=False),
        sa.Column("status", sa.String(), nullable=False, server_default="pending"),
        sa.Column("registered_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["game_id"], ["game.id"]),
        sa.ForeignKeyConstraint(["team_id"], ["team.id"]),
    )
    op.create_index("ix_player_game_id", "player", ["game_id"])
    op.create_index("ix_player_team_id", "player", ["team_id"])
    op.create_index("ix_player_contact", "player", ["contact"])

    # Create match table
    op.create_table(
        "match",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("game_id", sa.Integer(), nullable=False),
        sa.Column("sequence", sa.Integer(), nullable=False),
        sa.Column("team_a_id", sa.Integer(), nullable=False),
        sa.Column("team_a_name", sa.String(), nullable=False),
        sa.Column("team_b_id", sa.Integer(), nullable=False),
        sa.Column("team_b_name", sa.String(), nullable=False),
        sa.Column("score_a", sa.Integer(), nullable=True),
        sa.Column("score_b", sa.Integer(), nullable=True),
        sa.Column("scorers_a", sa.JSON(), nullable=True),
        sa.Column("scorers_b", sa.JSON(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("result_recorded_at", sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["game_id"], ["game.id"]),
        sa.ForeignKeyConstraint(["team_a_id"], ["team.id"]),
        sa.ForeignKeyConstraint(["team_b_id"], ["team.id"]),
    )
    op.create_index("ix_match_game_id", "match", ["game_id"])

    # Create sms_log table
    op.create_table(
        "sms_log",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("game_id", sa.Integer(), nullable=False),
        sa.Column("player_id", sa.Integer(), nullable=True),
        sa.Column("phone_number", sa.String(), nullable=False),
        sa.Column("message_body", sa.String(), nullable=False),
        sa.Column("message_type", sa.String(), nullable=False),
        sa.Column("twilio_sid", sa.String(), nullable=True),
        sa.Column("status", sa.String(), nullable=False),
        sa.Column("error_message", sa.String(), nullable=True),
        sa.Column("sent_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["game_id"], ["game.id"]),
        sa.ForeignKeyConstraint(["player_id"], ["player.id"]),
    )
    op.create_index("ix_sms_log_game_id", "sms_log", ["game_id"])


def downgrade() -> None:
    op.drop_index("ix_sms_log_game_id", table_name="sms_log")
    op.drop_table("sms_log")
    op.drop_index("ix_match_game_id", table_name="match")
    op.drop_table("match")
    op.drop_index("ix_player_contact", table_name="player")
    op.drop_index("ix_player_team_id", table_name="player")
    op.drop_index("ix_player_game_id", table_name="player")
    op.drop_table("player")
    op.drop_index("ix_team_game_id", table_name="team")
    op.drop_table("team")
    op.drop_table("game")
