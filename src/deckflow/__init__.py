"""
deckflow: document tree to ranked, positioned slide/page content blocks.
"""

__version__ = "1.0.0"
