"""
Research Loop.

Chains deep-research requests into a bounded sequence of steps:
each step researches the current subject, then asks the backend for the
next thread of inquiry.

Architecture: asyncio loop controller + retry engine (classifier, backoff)
over an httpx research backend; optional FastAPI research service backed
by Ollama.
"""

__version__ = "0.1.0"
