"""signdesk: document signature coordination for a training-organization back office."""
