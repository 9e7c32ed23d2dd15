"""Places domain - nearby restaurant lookup."""
