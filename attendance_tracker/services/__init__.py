"""Roster services: normalization, merge, engine API and summaries."""
