"""Core document model, endpoints, and reprocessing pipeline."""
