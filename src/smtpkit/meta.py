"""Package metadata for smtpkit."""

__app_name__ = "smtpkit"
__version__ = "0.1.0"
__author__ = "smtpkit contributors"
__description__ = "Build MIME mail messages and deliver them over SMTP."

__all__ = ["__app_name__", "__author__", "__description__", "__version__"]
