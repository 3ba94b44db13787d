"""Company Resolver: AI-backed resolution of company and platform names."""

__version__ = "1.0.0"
