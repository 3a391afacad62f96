"""
feedstore - relational storage for aggregator feeds.
"""

__version__ = "0.1.0"
