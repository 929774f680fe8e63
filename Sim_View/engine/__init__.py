"""Topology reconstruction engine: ingestion, liveness, grouping and playback."""
