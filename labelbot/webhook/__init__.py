"""
Webhook Package

This package contains webhook event handling:
- processor: label rules applied to GitHub webhook events
"""

from labelbot.webhook.processor import HookProcessor

__all__ = ["HookProcessor"]
