"""
Drivers that sequence storage operations for callers.
"""

from manager.demo import ContactDemo, DemoResult, SAMPLE_CONTACT, UPDATED_CONTACT

__all__ = ["ContactDemo", "DemoResult", "SAMPLE_CONTACT", "UPDATED_CONTACT"]
