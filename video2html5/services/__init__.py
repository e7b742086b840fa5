"""
Services Package for video2html5.

This package contains the "service layer" of the application. A service
performs one well-defined task and gets everything it needs (configuration,
other services) passed in explicitly, so the pipeline can be tested with
fakes for the external tools.

- classifier_service: supported / unsupported / unknown verdicts.
- probe_service: `ProbeTool` backends (mediainfo, ffprobe) and `ProbeResult` assembly.
- plan_service: `PlanBuilder`, which turns a probe result into a `TranscodePlan`.
- encoding_service: `EncoderTool` and the ffmpeg/avconv implementation.
- executor_service: runs a plan and drives the file through its states.
- file_state_service: archive/delete/keep handling and partial output cleanup.
- ledger_service: the append-only record of processed files.
- file_processing_service: expands command-line paths into files.
- logging_service: the error log in the config directory.
"""
