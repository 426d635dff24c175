"""ffprobe/ffmpeg wrappers doing the actual media work."""
