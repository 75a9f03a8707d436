"""Per-provider project holders."""
