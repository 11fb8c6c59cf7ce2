"""DealSense: deal aggregation with trust scoring, matching and deduplication."""

__version__ = "1.0.0"
