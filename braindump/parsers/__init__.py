"""Source readers and the shared content-block normalizer."""
