"""URL classification and the conversion orchestrator."""
