"""kubeawait: block until a Kubernetes resource reaches a desired state."""

__version__ = "0.1.0"
