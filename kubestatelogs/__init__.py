"""kube-state-logs: periodic, schema-stable state snapshots of Kubernetes resources."""

__version__ = "0.1.0"
