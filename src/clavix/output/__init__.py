"""
Output rendering for the clavix CLI.
"""

from .renderer import OutputRenderer

__all__ = ["OutputRenderer"]
