"""Telegram Web3 assistant: FAQ answers, crypto data and request escalation."""

__version__ = "0.1.0"
