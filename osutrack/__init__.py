"""osu!track: player stat history and change tracking."""
