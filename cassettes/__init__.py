"""Cassettes: a small catalog of physical video tapes."""
