"""Park tools component: the search capability exposed to the assistant."""

from .search_tool import NO_RESULTS_MESSAGE, SearchTool, format_results

__all__ = ["NO_RESULTS_MESSAGE", "SearchTool", "format_results"]
