"""MongoDB persistence for patterns, user actions and learned tracks."""
