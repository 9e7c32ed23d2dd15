"""Chat domain - follow-up questions about an analyzed menu."""
