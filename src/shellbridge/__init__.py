"""shellbridge: host bridge, event channel and kubeconfig resolution for a desktop UI shell."""

__version__ = "0.3.0"
