"""
video2html5: converts video files into formats HTML5 browsers and Chromecast play.

Packages:
    config: Built-in defaults and the loader that freezes them, the user's
            config.yaml and the command-line flags into a `Configuration`.
    domain: Probe results, transcode plans, file states and exceptions.
    services: Classification, probing, planning, encoding, file-state
              handling and the ledger.
    pipeline: Runs the input paths through the services one file at a time.
    utils: Subprocess, formatting and external tool helpers.
"""
