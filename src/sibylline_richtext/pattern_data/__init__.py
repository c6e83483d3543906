"""Packaged default pattern sets."""
