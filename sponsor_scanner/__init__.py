"""Sponsor Job Scanner: job postings from H-1B sponsoring employers."""

__version__ = "1.0.0"
