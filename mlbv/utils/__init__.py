"""Shared utility functions."""

from .date_utils import date_range, parse_game_date, resolve_day

__all__ = ["parse_game_date", "resolve_day", "date_range"]
