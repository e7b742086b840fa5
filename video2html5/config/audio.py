"""
Configuration settings related to audio processing.

Audio codec names are the ones reported by `mediainfo --Inform="Audio;%Format%"`.
Note that both `aac` and `AAC` are listed: codec names are matched exactly,
so every spelling a probe tool may emit has to be present.
"""

# --- Codec Lists ---
# Multichannel AAC stopped playing on Chromecast with firmware 1.28
# (https://issuetracker.google.com/issues/69112577#comment4).
SUPPORTED_ACODECS = ("aac", "AAC", "AAC LC", "MPEG Audio", "Vorbis", "Ogg", "Opus")
UNSUPPORTED_ACODECS = ("AC-3", "DTS", "E-AC-3", "PCM", "TrueHD", "Cooker")

# --- Encoder Settings ---
DEFAULT_ACODEC = "libvorbis"
DEFAULT_ACODEC_OPTS = ""

# Channel count assumed when the probe reports none: treat the track as
# multichannel.
DEFAULT_AUDIO_CHANNELS = 3

# Highest channel count considered stereo.
STEREO_CHANNELS = 2
