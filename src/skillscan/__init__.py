"""skillscan: security and quality audits for agent skill directories."""

__version__ = "0.1.0"
