"""hypercast - Farcaster client and Telegram bot for HyperSnap nodes."""

__version__ = "0.1.0"
