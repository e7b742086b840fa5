"""
Configuration settings related to video processing.

This module defines the video file extensions the application recognizes,
the video codecs known to play (or not play) in HTML5 players and on
first/second generation Chromecasts, and the default re-encode parameters.
Codec names are the ones reported by `mediainfo --Inform="Video;%Format%"`.
"""

# --- File Identification ---
# Compared case-insensitively, without the leading dot.
VIDEO_EXTENSIONS = (
    "mkv", "avi", "mp4", "3gp", "mov", "mpg", "mpeg", "qt",
    "wmv", "m2ts", "flv", "webm", "m4v",
)

# --- Codec Lists ---
SUPPORTED_VCODECS = ("AVC", "VP8", "VP9")
UNSUPPORTED_VCODECS = ("MPEG-4 Visual", "xvid", "MPEG Video", "HEVC", "RealVideo 4")

# --- Encoder Settings ---
# https://developers.google.com/cast/docs/media
DEFAULT_VCODEC = "libvpx"
DEFAULT_VCODEC_OPTS = "-b:v 1000k -cpu-used 8"
# An H.264 setup that also works well:
#   DEFAULT_VCODEC = "h264"
#   DEFAULT_VCODEC_OPTS = "-preset fast -profile:v high -level 4.1 -crf 24 -pix_fmt yuv420p"
