"""Timeline store and its HTTP bridge."""
