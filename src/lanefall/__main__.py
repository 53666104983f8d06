"""Entry point for `python -m lanefall` or the `lanefall` console script."""

import argparse
import logging
import sys
from pathlib import Path

from lanefall.settings import load_settings
from lanefall.song_loader import NoteParseError, SongLoadError, load_song


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="LaneFall: a four-lane rhythm game")
    parser.add_argument("song", help="Note table (.csv) or MIDI file to play")
    parser.add_argument("--soundfont", help="SoundFont (.sf2) used for note playback")
    parser.add_argument("--title", help="Song title for high scores (default: file name)")
    parser.add_argument("--player-track", type=int, default=1,
                        help="MIDI track the player plays (default 1)")
    parser.add_argument("--reset-high-score", action="store_true",
                        help="Reset the stored high score for this song and exit")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    title = args.title or Path(args.song).stem

    if args.reset_high_score:
        from lanefall.progress import HighScoreStore
        store = HighScoreStore(title)
        store.reset_high_score()
        store.close()
        print(f"High score for {title} reset.")
        return 0

    try:
        notes = load_song(args.song, player_track=args.player_track)
    except NoteParseError as exc:
        print(f"Could not load {args.song}:", file=sys.stderr)
        for error in exc.errors:
            print(f"  {error}", file=sys.stderr)
        return 1
    except SongLoadError as exc:
        print(exc, file=sys.stderr)
        return 1

    settings = load_settings()
    if args.soundfont:
        settings.soundfont_path = args.soundfont

    from lanefall.app import App

    App(notes, song_title=title, settings=settings).run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
