"""
Configuration file for the Neural Network Visualizer
=====================================================

All service endpoints, polling settings, training defaults, visual encoding
options and reference-service parameters are centralized here.
Modify these values (or pass CLI flags to main.py) to point the visualizer at
a different network service or change how the network is drawn.

Usage:
    from config import Config
    cfg = Config()
    print(cfg.API_BASE_URL)
"""

from dataclasses import dataclass, field
from typing import List, Tuple, Optional, Dict, Any


@dataclass
class Config:
    """
    Central configuration for the entire project.

    Sections:
    1. Screen Settings - Window and canvas geometry
    2. Network Service - Where the visualizer fetches state and sends commands
    3. Training - Defaults for the train command
    4. Visualization - Neuron/connection encoding policy
    5. Logging - Log directory and verbosity
    6. Reference Service - The bundled network service (--serve)
    """

    # =========================================================================
    # SCREEN SETTINGS
    # =========================================================================

    # Network canvas (the raster target all layout math is relative to)
    CANVAS_WIDTH: int = 800
    CANVAS_HEIGHT: int = 600

    # Side panel with controls, status and the pattern list
    PANEL_WIDTH: int = 320

    # Full window = canvas + panel
    @property
    def SCREEN_WIDTH(self) -> int:
        """Window width: canvas plus control panel."""
        return self.CANVAS_WIDTH + self.PANEL_WIDTH

    @property
    def SCREEN_HEIGHT(self) -> int:
        """Window height: same as the canvas."""
        return self.CANVAS_HEIGHT

    FPS: int = 30

    # =========================================================================
    # NETWORK SERVICE
    # =========================================================================

    # Base URL of the network service (GET /api/network/state, POST train/reset)
    API_BASE_URL: str = 'http://localhost:8080'

    # State poll period in milliseconds
    POLL_INTERVAL_MS: int = 1000

    # Request timeout in seconds (None = wait for whatever the transport reports)
    REQUEST_TIMEOUT: Optional[float] = None

    # Worker threads for HTTP requests (polls and commands)
    IO_WORKERS: int = 2

    # =========================================================================
    # TRAINING
    # =========================================================================

    # Epochs sent with each train command
    DEFAULT_EPOCHS: int = 1000

    # Step used by the +/- keys when adjusting epochs
    EPOCH_STEP: int = 100

    # Initial training patterns (XOR)
    DEFAULT_PATTERNS: List[Dict[str, Any]] = field(default_factory=lambda: [
        {'features': [0.0, 0.0], 'multipleExpectation': [0.0]},
        {'features': [0.0, 1.0], 'multipleExpectation': [1.0]},
        {'features': [1.0, 0.0], 'multipleExpectation': [1.0]},
        {'features': [1.0, 1.0], 'multipleExpectation': [0.0]},
    ])

    # =========================================================================
    # VISUALIZATION SETTINGS
    # =========================================================================

    NEURON_RADIUS: int = 20

    # Decimal digits for neuron value labels
    LABEL_PRECISION: int = 2

    # Render bias as a secondary label below each neuron
    SHOW_BIAS: bool = True

    # Connection stroke width range (pixels)
    MIN_CONNECTION_WIDTH: int = 1
    MAX_CONNECTION_WIDTH: int = 4

    # Colors (RGB tuples)
    COLOR_BACKGROUND: Tuple[int, int, int] = (255, 255, 255)
    COLOR_PANEL: Tuple[int, int, int] = (24, 26, 38)
    COLOR_TEXT: Tuple[int, int, int] = (20, 20, 20)
    COLOR_NEURON: Tuple[int, int, int] = (0, 123, 255)
    COLOR_NEURON_BORDER: Tuple[int, int, int] = (0, 0, 0)
    COLOR_WEIGHT_POS: Tuple[int, int, int] = (30, 150, 60)
    COLOR_WEIGHT_NEG: Tuple[int, int, int] = (210, 50, 50)

    # =========================================================================
    # LOGGING
    # =========================================================================

    LOG_DIR: str = 'logs'

    # 'DEBUG', 'INFO', 'WARNING', 'ERROR'
    LOG_LEVEL: str = 'INFO'

    # Also write a timestamped log file under LOG_DIR
    LOG_TO_FILE: bool = False

    # =========================================================================
    # REFERENCE SERVICE
    # =========================================================================

    SERVICE_HOST: str = '127.0.0.1'
    SERVICE_PORT: int = 8080

    # Neurons per layer, input first
    SERVICE_LAYER_SIZES: List[int] = field(default_factory=lambda: [2, 4, 1])

    SERVICE_LEARNING_RATE: float = 0.5

    # Epochs used when a train request asks for 0 or fewer
    SERVICE_DEFAULT_EPOCHS: int = 1000

    # Random seed for the reference network (None for random)
    SEED: Optional[int] = None

    def __post_init__(self):
        """Validation."""
        assert self.CANVAS_WIDTH > 0, "Canvas width must be positive"
        assert self.CANVAS_HEIGHT > 0, "Canvas height must be positive"
        assert self.POLL_INTERVAL_MS > 0, "Poll interval must be positive"
        assert self.REQUEST_TIMEOUT is None or self.REQUEST_TIMEOUT > 0, \
            "Request timeout must be positive or None"
        assert self.IO_WORKERS > 0, "Need at least one I/O worker"
        assert self.DEFAULT_EPOCHS > 0, "Default epochs must be positive"
        assert self.NEURON_RADIUS > 0, "Neuron radius must be positive"
        assert self.LABEL_PRECISION >= 0, "Label precision must be >= 0"
        assert 0 < self.MIN_CONNECTION_WIDTH <= self.MAX_CONNECTION_WIDTH, \
            "Connection width range must be positive and ordered"
        assert self.LOG_LEVEL in ('DEBUG', 'INFO', 'WARNING', 'ERROR'), \
            "Unknown log level"
        assert len(self.SERVICE_LAYER_SIZES) >= 2, "Service network needs input and output layers"
        assert all(n > 0 for n in self.SERVICE_LAYER_SIZES), "Layer sizes must be positive"
        assert self.SERVICE_LEARNING_RATE > 0, "Learning rate must be positive"


# Global config instance for easy importing
config = Config()


if __name__ == "__main__":
    # Print configuration summary
    cfg = Config()
    print("=" * 60)
    print("Neural Network Visualizer - Configuration Summary")
    print("=" * 60)
    print(f"\nCanvas: {cfg.CANVAS_WIDTH}x{cfg.CANVAS_HEIGHT} (window {cfg.SCREEN_WIDTH}x{cfg.SCREEN_HEIGHT})")
    print(f"\nService: {cfg.API_BASE_URL}")
    print(f"   Poll interval: {cfg.POLL_INTERVAL_MS} ms")
    print(f"   Timeout: {cfg.REQUEST_TIMEOUT}")
    print(f"\nTraining:")
    print(f"   Epochs: {cfg.DEFAULT_EPOCHS}")
    print(f"   Patterns: {len(cfg.DEFAULT_PATTERNS)}")
    print(f"\nReference service: {cfg.SERVICE_HOST}:{cfg.SERVICE_PORT}")
    print(f"   Layers: {cfg.SERVICE_LAYER_SIZES}")
    print(f"   Learning rate: {cfg.SERVICE_LEARNING_RATE}")
    print("=" * 60)
