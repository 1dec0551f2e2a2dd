"""Define constants shared by reference frames."""

DEFAULT_FRAME = "world"
"""Name of the frame assumed when a pose doesn't specify its reference frame."""
