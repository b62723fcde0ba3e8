"""
Acquiring bank integrations.

- base.BankClient: Abstract interface that all bank clients implement
- http_bank_client.HttpBankClient: Production client for the bank's HTTP API
- simulator.SimulatedBankClient: In-process stand-in mirroring the bank simulator
- factory: Configuration-based client selection
"""

from payment_gateway.clients.base import BankClient
from payment_gateway.clients.factory import BankClientFactory, get_bank_client
from payment_gateway.clients.http_bank_client import HttpBankClient
from payment_gateway.clients.simulator import SimulatedBankClient

__all__ = [
    "BankClient",
    "BankClientFactory",
    "HttpBankClient",
    "SimulatedBankClient",
    "get_bank_client",
]
