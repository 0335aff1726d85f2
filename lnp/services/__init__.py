"""Application services orchestrating import, matching and export."""
