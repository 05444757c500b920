"""User interfaces built on top of the mdsmith pipeline."""
