"""
Garden - The Walled-Garden Video Player for Kids

A Textual TUI application providing:
- Grid: a fixed set of parent-approved videos
- Player: loops the chosen video, falls back to a local copy if needed
- Settings: library management behind a parent gate

Designed for ages 2-6. No search, no recommendations, no way out.
"""

__version__ = "1.0.0"
