"""User-facing interfaces for NodeVault."""
