"""
External service connectors
"""
from app.connectors.stripe_connector import StripeConnector

__all__ = ['StripeConnector']
