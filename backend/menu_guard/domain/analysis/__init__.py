"""Menu analysis domain.

Safety classification of menu items against an allergy/preference profile.
"""
