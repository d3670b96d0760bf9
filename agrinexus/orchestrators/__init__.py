"""
Feature orchestrators: input -> agent tracker -> gateway -> typed result
"""
from .base import BaseFlow
from .scanner import ScannerFlow
from .chat import ChatSession
from .identity import IdentityFlow
from .market import MarketFlow

__all__ = [
    'BaseFlow',
    'ScannerFlow',
    'ChatSession',
    'IdentityFlow',
    'MarketFlow'
]
