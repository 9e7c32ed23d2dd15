"""Menu Guard backend.

Allergy-aware restaurant menu analysis: an AI gateway, account and history
services, and a Python client for the same flows.
"""
