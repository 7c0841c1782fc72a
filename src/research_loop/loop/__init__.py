"""
Research loop controller.

Drives a bounded sequence of research steps: research the current
subject, then (unless it was the last step) ask for the next one.
"""

from research_loop.loop.controller import LoopController, LoopObserver, run_loop
from research_loop.loop.exceptions import LoopAborted

__all__ = [
    "LoopController",
    "LoopObserver",
    "LoopAborted",
    "run_loop",
]
