"""
GitHub Label Bot

Applies label rules to GitHub webhook events: clears "pending author" when
the author responds and keeps "review required" / "RTM" in sync with pull
request updates.
"""

__version__ = "1.0.0"
