# safeinput - Ports (Protocol Interfaces)
# Abstract interfaces for rules and adapters; no implementations here

from safeinput.core.ports.storage import StoragePort
from safeinput.core.ports.validator import Validator

__all__ = [
    "StoragePort",
    "Validator",
]
