"""
Collaborator ports consumed by the publishing pipeline.

Implementations live elsewhere (relational store, object storage, session
layer); the pipeline only depends on these protocols.
"""

from pressroom.core.ports.clock import ClockPort, SleeperPort
from pressroom.core.ports.identity import IdentityPort
from pressroom.core.ports.persistence import DocumentRepoPort
from pressroom.core.ports.storage import StorageError, StoragePort

__all__ = [
    "ClockPort",
    "DocumentRepoPort",
    "IdentityPort",
    "SleeperPort",
    "StorageError",
    "StoragePort",
]
