"""
prefixbus - In-process message bus with prefix matching and RPC
"""

__version__ = "0.1.0"

from prefixbus.bus import Broker, MessageBus, create_bus

__all__ = ["Broker", "MessageBus", "create_bus", "__version__"]
