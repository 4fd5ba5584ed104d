"""
Network Module
==============

Everything that talks to (or stands for) the remote network service.

Classes:
    NetworkState, LayerState, NeuronState, TrainingPattern - Payload types
    NetworkClient       - HTTP client for the service
    StateStore          - Latest-snapshot cell shared by poll and commands
    StateSynchronizer   - Periodic state poller
    CommandDispatcher   - Train / reset / refresh commands
    TrainingGate        - Idle / in-flight guard for exclusive commands
"""

from .models import NetworkState, LayerState, NeuronState, TrainingPattern
from .client import NetworkClient, NetworkServiceError
from .store import StateStore
from .commands import CommandDispatcher, TrainingGate, GateState
from .sync import StateSynchronizer, POLL_EVENT

__all__ = [
    'NetworkState', 'LayerState', 'NeuronState', 'TrainingPattern',
    'NetworkClient', 'NetworkServiceError',
    'StateStore',
    'CommandDispatcher', 'TrainingGate', 'GateState',
    'StateSynchronizer', 'POLL_EVENT',
]
