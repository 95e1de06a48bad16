"""
Integration tests package.

Tests here talk to real local services and carry the `integration` marker.
"""
