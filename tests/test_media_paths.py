"""
Tests for local video file naming.

Run with: pytest tests/test_media_paths.py -v
"""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from garden_tui.media_paths import local_video_path, sanitize_title


class TestSanitizeTitle:

    def test_plain_title_unchanged(self):
        assert sanitize_title("Baby Shark") == "Baby Shark"

    def test_apostrophe_kept(self):
        assert sanitize_title("If You're Happy") == "If You're Happy"

    def test_illegal_characters_removed(self):
        assert sanitize_title('a<b>c:d"e/f\\g|h?i*j') == "abcdefghij"

    def test_whitespace_collapsed(self):
        assert sanitize_title("Wheels   on\tthe\nBus") == "Wheels on the Bus"

    def test_trimmed(self):
        assert sanitize_title("  Old MacDonald  ") == "Old MacDonald"

    def test_removal_then_collapse(self):
        assert sanitize_title("What? Why! / How") == "What Why! How"


class TestLocalVideoPath:

    def test_path_under_base_dir(self, tmp_path):
        assert local_video_path("Baby Shark", tmp_path) == tmp_path / "Baby Shark.mp4"

    def test_sanitized_name(self, tmp_path):
        path = local_video_path("Head: Shoulders?", tmp_path)
        assert path.name == "Head Shoulders.mp4"
        assert path.parent == tmp_path

    def test_accepts_str_base(self):
        assert local_video_path("Baby Shark", "/videos") == Path("/videos/Baby Shark.mp4")
