"""revchain: review, revise and merge the output of autonomous coding agents."""

__version__ = "0.1.0-dev"
