"""Escape-time math: viewport snapshots, iteration and iteration policy."""
