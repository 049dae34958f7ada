"""Azure monthly cost estimates from Terraform JSON plans."""

__version__ = "0.1.0"
