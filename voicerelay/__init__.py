"""VoiceRelay - push-to-talk transcription relay."""

__version__ = "0.1.0"
