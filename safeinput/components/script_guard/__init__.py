"""
Script guard component - Script tag, dangerous protocol and event handler detection.
"""

from .component import (
    SCRIPT_CHECKS,
    ScriptCheck,
    ScriptDetector,
    detect,
)

__all__ = [
    "SCRIPT_CHECKS",
    "ScriptCheck",
    "ScriptDetector",
    "detect",
]
