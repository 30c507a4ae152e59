"""Domain layer: media library and playback orchestration."""
