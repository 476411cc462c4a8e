"""Readers for annotation documents and writers for result tables."""
