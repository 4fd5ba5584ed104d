"""
Visualizer Module
=================

Drawing the network and the controls around it.

Classes:
    Positions / compute_layout - Neuron coordinates for a canvas size
    VisualEncoder              - Value -> color/opacity/width policy
    NetworkRenderer            - Draws a snapshot onto a surface
    StatusHUD                  - Epoch / error / connection status
    ControlPanel               - Command buttons
    PatternList, PatternPanel  - Training pattern model and editor
"""

from .layout import Positions, compute_layout
from .encoder import VisualEncoder, NeuronStyle, ConnectionStyle
from .renderer import NetworkRenderer, RenderStats
from .hud import StatusHUD
from .controls import ControlPanel, ControlButton
from .patterns import PatternList, PatternPanel, parse_pattern, format_pattern

__all__ = [
    'Positions', 'compute_layout',
    'VisualEncoder', 'NeuronStyle', 'ConnectionStyle',
    'NetworkRenderer', 'RenderStats',
    'StatusHUD',
    'ControlPanel', 'ControlButton',
    'PatternList', 'PatternPanel', 'parse_pattern', 'format_pattern',
]
