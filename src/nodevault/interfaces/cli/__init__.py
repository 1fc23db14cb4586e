"""Terminal interface for NodeVault."""
