"""Ranking core: candidate retrieval, scoring, diversity and orchestration."""
