"""Zendesk Notifier: forwards issue tracker change events to Zendesk tickets."""

__version__ = "1.0.0"
