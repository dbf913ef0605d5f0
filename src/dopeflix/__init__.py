"""Episode and video-link resolver for DopeBox/SFlix-style streaming sites."""

__version__ = "0.1.0"
