"""Terminal client for VoiceRelay."""
