"""Application layer: settings, logging setup and the chunkwise command."""
