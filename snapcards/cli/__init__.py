"""
Command-line interface for snapcards.
"""
