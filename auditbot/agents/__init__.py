"""Agents package — LangGraph node functions for the repository audit workflow."""

from .repo_fetcher import acquire_node, install_node
from .vulnerability_auditor import measure_before_node, remediate_node, measure_after_node
from .publisher import publish_node
from .janitor import cleanup_node

__all__ = [
    "acquire_node",
    "install_node",
    "measure_before_node",
    "remediate_node",
    "measure_after_node",
    "publish_node",
    "cleanup_node",
]
