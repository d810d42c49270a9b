"""
Garden - Shared Constants

Central location for constants used across the app.
"""

# =============================================================================
# PARENT GATE
# =============================================================================

# Arithmetic challenge operand ranges (inclusive)
ADD_RANGE = ((10, 29), (10, 29))
SUBTRACT_RANGE = ((20, 49), (5, 19))    # Right side always smaller: answer > 0
MULTIPLY_RANGE = ((3, 10), (3, 10))

GATE_MAX_ATTEMPTS = 3          # Wrong answers before the gate closes itself
GATE_LOCKOUT_DELAY = 1.5       # Seconds between the last wrong answer and cancel

# Hold-to-unlock
HOLD_DURATION = 3.0            # Seconds the hold control must stay pressed
HOLD_TICK = 0.05               # Progress sampling interval (seconds)
HOLD_KEY_RELEASE_GAP = 0.8     # No key repeat for this long = key released (X11 repeat delay is 660 ms)

# =============================================================================
# LIBRARY
# =============================================================================

VIDEO_ID_LENGTH = 11
TITLE_MAX_LENGTH = 30          # Child-facing label, keep it short

# Choices offered on the add form
EMOJI_CHOICES = ["🎵", "🎬", "🎪", "🎨", "🎭", "🦁", "🐻", "🦄", "🌈", "⭐", "🚀", "🎸"]
COLOR_CHOICES = [
    "#FF6B6B", "#4ECDC4", "#FFE66D", "#95E1D3",
    "#A78BFA", "#67B7DC", "#FDCB6E", "#FF85A2",
    "#B2F2BB", "#C4B5FD", "#F9A826", "#FF9FF3",
]

# =============================================================================
# PLAYBACK
# =============================================================================

LOCAL_VIDEO_EXTENSION = ".mp4"
PRIVACY_HOST = "https://www.youtube-nocookie.com"
THUMBNAIL_HOST = "https://img.youtube.com"

# =============================================================================
# ICONS
# =============================================================================

ICON_MOVIE = "🎬"
ICON_SETTINGS = "⚙️"
ICON_LOCK = "🔒"
ICON_BACK = "←"
ICON_HOLD = "👆"
ICON_SAD = "😢"
ICON_TRASH = "🗑️"
