"""
This package contains the conversion pipeline of video2html5.

The pipeline walks the input paths and takes each file through
classification, planning, conversion and the ledger, one file at a time.
"""
