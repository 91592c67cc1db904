"""agentflow: a small state-graph engine and the example workflows built on it."""

__version__ = "1.0.0"
