"""Account domain module.

Identity, user profiles, Pro subscription and persisted analysis history.
Authentication is delegated to an external provider; the domain only keeps
the app-specific profile and history rows.
"""
