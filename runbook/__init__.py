"""runbook - run named shell tasks in dependency order."""

__version__ = "0.1.0"
