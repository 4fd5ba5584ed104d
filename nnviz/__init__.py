"""
Neural Network Visualizer - Source Package
==========================================

Live view and remote control of a feed-forward network trained by a
separate network service.

Modules:
    network/    - Payload types, HTTP client, state store, poller, commands
    visualizer/ - Layout, visual encoding, renderer and control panel
    service/    - Reference network service (Flask + torch)
    utils/      - Logging
"""

__version__ = "1.0.0"
