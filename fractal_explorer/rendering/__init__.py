"""Palettes, coloring, region and preview renderers, image export."""
