"""Per-section analysis and derived dynamic indices."""
