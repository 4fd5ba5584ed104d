"""
Service Module
==============

Reference implementation of the network service the visualizer talks to.
Runs as its own process (python main.py --serve).

Components:
    mlp.py    - Sigmoid MLP trained with online gradient descent (torch)
    server.py - Flask app exposing state / train / reset
"""

from .mlp import MultiLayerNetwork
from .server import NetworkService, PatternShapeError, create_app, run_service

__all__ = ['MultiLayerNetwork', 'NetworkService', 'PatternShapeError', 'create_app', 'run_service']
