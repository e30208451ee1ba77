"""Weather forecast API handler with an Open-Meteo client and a DynamoDB cache."""

__version__ = "0.1.0"

__all__ = ["__version__"]