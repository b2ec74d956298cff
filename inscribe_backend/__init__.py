"""Inscribe backend: read and write the embedded comment of image files."""
