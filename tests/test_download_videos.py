"""
Tests for the fallback video download script.

The script and the player must agree on where each video lives.
"""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))
sys.path.insert(0, str(Path(__file__).parent.parent / "scripts"))

from download_videos import DEFAULT_COUNT, FORMAT, build_command
from garden_tui.library import DEFAULT_LIBRARY, VideoEntry
from garden_tui.media_paths import local_video_path


class TestBuildCommand:

    def test_output_is_player_path(self, tmp_path):
        entry = DEFAULT_LIBRARY[0]
        cmd = build_command(entry, tmp_path)
        output = cmd[cmd.index("-o") + 1]
        assert output == str(local_video_path(entry.title, tmp_path))

    def test_sanitized_title(self, tmp_path):
        cmd = build_command(VideoEntry("dQw4w9WgXcQ", "What? A/B"), tmp_path)
        output = Path(cmd[cmd.index("-o") + 1])
        assert output.name == "What AB.mp4"

    def test_prefers_mp4(self, tmp_path):
        cmd = build_command(DEFAULT_LIBRARY[0], tmp_path)
        assert cmd[cmd.index("-f") + 1] == FORMAT == "best[ext=mp4]/best"
        assert "--no-playlist" in cmd

    def test_watch_url_last(self, tmp_path):
        cmd = build_command(DEFAULT_LIBRARY[0], tmp_path)
        assert cmd[-1] == "https://www.youtube.com/watch?v=XqZsoesa55w"

    def test_default_count(self):
        assert DEFAULT_COUNT == 6
