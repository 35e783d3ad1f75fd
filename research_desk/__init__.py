"""Research desk backend: research sessions, deliberation transcripts and simulated trades."""

__version__ = "0.1.0"
