"""Domain layer for Menu Guard.

Business rules for menu analysis, chat, places and accounts, decoupled
from the HTTP/GraphQL surface and from infrastructure adapters.
"""
