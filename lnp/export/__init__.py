"""Pairing export."""
