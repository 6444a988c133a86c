"""GKash Fund Manager USSD service."""

__version__ = "1.0.0"
