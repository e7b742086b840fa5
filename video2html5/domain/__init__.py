"""
This package contains the core domain models of video2html5.

The domain layer describes what the application reasons about, independent of
the CLI, the config file and the external tools:

Modules:
    exceptions.py: The exception hierarchy. Fatal configuration problems,
                   recoverable per-file conversion failures, and skip notices.
    media.py: `ProbeResult`, the immutable record of what the probe tool
              reported about a file.
    plan.py: `TranscodePlan`, `NoOpCompatible` and the file lifecycle
             (`FileState`), i.e. the output of the decision engine.
"""
