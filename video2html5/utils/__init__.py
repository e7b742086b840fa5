"""
Utilities Package for video2html5.

Modules:
    - ffmpeg_utils.py: `run_cmd`, the wrapper every external command goes through.
    - format_utils.py: Durations and file sizes as human-readable strings.
    - external_tools.py: Locates and verifies the probe tool and the encoder.
"""
