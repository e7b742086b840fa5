"""
Configuration Package for video2html5.

This package centralizes the built-in defaults of the application and the
code that turns them, together with the user's `config.yaml` and the
command-line flags, into one immutable `Configuration` object:

- `common`: logger format, config directory layout, success policies,
  container format lists, external tool names.
- `video` / `audio`: extensions, codec allow/deny lists and encoder defaults.
- `models`: the frozen dataclasses (`Configuration`, `Registry`, ...).
- `loader`: config directory checks and config file parsing.
"""
