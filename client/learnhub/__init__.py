"""LearnHub - async client for the LMS REST API."""

__version__ = "0.1.0"
