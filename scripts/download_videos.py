#!/usr/bin/env python3
"""
Download local fallback copies of the default videos

Uses the yt-dlp command-line tool. Each video is saved to exactly the path
the player looks for when the remote source fails:

    <videos dir>/<sanitized title>.mp4

Usage:
    python scripts/download_videos.py            # first 6 default videos
    python scripts/download_videos.py --count 8
    python scripts/download_videos.py --output /media/usb/videos
"""

import shutil
import subprocess
import sys
from pathlib import Path

SCRIPT_DIR = Path(__file__).parent
PROJECT_ROOT = SCRIPT_DIR.parent
sys.path.insert(0, str(PROJECT_ROOT))

from garden_tui.config import get_videos_dir
from garden_tui.library import DEFAULT_LIBRARY, VideoEntry
from garden_tui.media_paths import local_video_path

FORMAT = "best[ext=mp4]/best"  # Prefer mp4, fall back to best available
DEFAULT_COUNT = 6


def check_ytdlp() -> bool:
    """True if yt-dlp is installed and runs"""
    if shutil.which("yt-dlp") is None:
        return False
    try:
        subprocess.run(["yt-dlp", "--version"], capture_output=True, timeout=10, check=True)
        return True
    except (OSError, subprocess.SubprocessError):
        return False


def build_command(entry: VideoEntry, videos_dir: Path) -> list[str]:
    """yt-dlp arguments for one video"""
    return [
        "yt-dlp",
        "-f", FORMAT,
        "--remux-video", "mp4",
        "-o", str(local_video_path(entry.title, videos_dir)),
        "--no-playlist",
        "--newline",
        f"https://www.youtube.com/watch?v={entry.id}",
    ]


def download_video(entry: VideoEntry, videos_dir: Path) -> tuple[bool, str]:
    """
    Download one video.

    Returns:
        Tuple of (success, error message)
    """
    try:
        result = subprocess.run(build_command(entry, videos_dir))
    except OSError as e:
        return False, str(e)
    if result.returncode != 0:
        return False, f"exit code {result.returncode}"
    return True, ""


def main():
    import argparse

    parser = argparse.ArgumentParser(description="Download local copies of the default videos")
    parser.add_argument("--count", "-n", type=int, default=DEFAULT_COUNT,
                        help=f"How many default videos to download (default {DEFAULT_COUNT})")
    parser.add_argument("--output", "-o", type=Path, default=None,
                        help="Videos directory (default: GARDEN_VIDEOS_DIR or ~/.garden/videos)")
    args = parser.parse_args()

    if not check_ytdlp():
        print("Error: yt-dlp is not installed")
        print("\nInstall it with one of:")
        print("  sudo apt install yt-dlp")
        print("  pip install yt-dlp")
        sys.exit(1)

    videos_dir = args.output or get_videos_dir()
    videos_dir.mkdir(parents=True, exist_ok=True)
    videos = list(DEFAULT_LIBRARY[:max(args.count, 0)])

    print(f"Downloading {len(videos)} videos to {videos_dir.resolve()}")

    failed = []
    for i, entry in enumerate(videos, 1):
        print(f"\n{entry.emoji} [{i}/{len(videos)}] {entry.title}")
        ok, error = download_video(entry, videos_dir)
        if ok:
            print(f"  ✓ Saved {local_video_path(entry.title, videos_dir).name}")
        else:
            print(f"  ✗ Failed: {error}")
            failed.append((entry, error))

    print(f"\nDone: {len(videos) - len(failed)} downloaded, {len(failed)} failed")
    for entry, error in failed:
        print(f"  - {entry.title}: {error}")

    sys.exit(1 if failed else 0)


if __name__ == "__main__":
    main()
