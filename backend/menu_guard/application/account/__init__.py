"""Account application layer: auth, profile, history and Pro upgrade use cases."""
