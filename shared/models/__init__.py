"""
Data models shared by the API gateway and its services.
"""

from .aura import AuraReading, AuraReadingPage, AuraStats, ScanEligibility

__all__ = [
    "AuraReading",
    "AuraReadingPage",
    "AuraStats",
    "ScanEligibility",
]
