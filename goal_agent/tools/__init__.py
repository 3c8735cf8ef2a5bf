"""
External tools the agent can route actions to.
"""

from .search import NO_RESULT_TEXT, SerperSearch, collect_snippets, search

__all__ = ["NO_RESULT_TEXT", "SerperSearch", "collect_snippets", "search"]
