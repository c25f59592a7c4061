"""Data models for kube-state-logs."""
