"""
Anonymous Notes API Service.

A small web API backing an anonymous note-sharing site.

The service allows users to:
- Submit short anonymous notes, optionally tagged
- Read a random visible note, like it or report it
- Leave free-text feedback for the site owners

Notes reported three times are hidden automatically. A password-gated
admin surface lists everything and lets moderators hide, retag, reset
or delete notes.
"""

__version__ = "0.1.0"
