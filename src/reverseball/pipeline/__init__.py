"""Pipeline orchestration on top of qualification and enrichment."""

from .service import assign_ids, list_players, lookup_player, rank_role, run

__all__ = ["assign_ids", "list_players", "lookup_player", "rank_role", "run"]
