"""SFO binary codec and file model."""
