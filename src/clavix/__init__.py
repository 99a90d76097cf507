"""
Clavix - prompt intelligence for developer CLI and agent workflows.

Classifies a prompt's intent, scores its quality, enriches it with the
sections it is missing and recommends how much more elaboration it needs.
"""

__version__ = "0.1.0"
__author__ = "Clavix Team"
__license__ = "MIT"

__all__ = ["__version__"]
