"""Japanese social-insurance eligibility and compliance engine."""

__version__ = "0.1.0"
