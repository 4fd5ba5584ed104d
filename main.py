#!/usr/bin/env python3
"""
Neural Network Visualizer - Main Entry Point
============================================

Live view of a feed-forward network trained by a separate network service,
with controls to train, reset and edit the training patterns.

Usage:
    # Start the reference network service (terminal 1)
    python main.py --serve

    # Open the visualizer against it (terminal 2)
    python main.py

    # Point at another service, poll twice a second
    python main.py --api-url http://10.0.0.5:8080 --poll-interval 500

    # Train on patterns from a file
    python main.py --patterns patterns.json --epochs 5000

    # Serve a bigger network
    python main.py --serve --layers 3,6,4,2 --port 9000

The window shows:
    - Left: the network (neuron fill = activation, edge color = weight sign,
      edge opacity/width = weight magnitude)
    - Right: status, command buttons and the training pattern list

Press:
    - T: Train on the current patterns
    - R: Reset the network
    - A: Add a pattern
    - Delete: Remove the selected pattern
    - Enter: Edit the selected pattern ("0 1 -> 1"), Enter again to apply
    - Up/Down: Select pattern
    - +/-: Adjust epochs
    - B: Toggle bias labels
    - ESC or Q: Quit
"""

# Suppress pygame's pkg_resources deprecation warning (pygame issue #4557)
import warnings
warnings.filterwarnings("ignore", category=UserWarning, module="pygame.pkgdata")

import argparse
import os
import sys
from concurrent.futures import Executor, ThreadPoolExecutor
from typing import Optional, List, Tuple

import pygame

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from config import Config
from nnviz.network import (
    NetworkClient,
    NetworkState,
    StateStore,
    StateSynchronizer,
    CommandDispatcher,
)
from nnviz.visualizer import (
    Positions,
    compute_layout,
    VisualEncoder,
    NetworkRenderer,
    StatusHUD,
    ControlPanel,
    PatternList,
    PatternPanel,
)
from nnviz.utils.logger import get_logger, setup_logging, LogLevel

_logger = get_logger(__name__)


class VisualizerApp:
    """
    pygame application: one canvas for the network, one side panel.

    The main loop is the only thread that touches pygame. Polls and commands
    run on an I/O executor and hand their results to the StateStore; the
    loop notices the new version and redraws the canvas.
    """

    def __init__(
        self,
        config: Config,
        patterns: Optional[PatternList] = None,
        client: Optional[NetworkClient] = None,
        executor: Optional[Executor] = None
    ):
        """
        Args:
            config: Configuration object
            patterns: Initial training patterns (default: config.DEFAULT_PATTERNS)
            client: Network service client (default: from config)
            executor: Where requests run (default: a small thread pool)
        """
        self.config = config

        pygame.init()
        self.screen = pygame.display.set_mode(
            (config.SCREEN_WIDTH, config.SCREEN_HEIGHT),
            pygame.RESIZABLE
        )
        pygame.display.set_caption("Neural Network Visualizer")
        self.clock = pygame.time.Clock()

        self.min_canvas_width = 300
        self.min_canvas_height = 240
        self.canvas = pygame.Surface((config.CANVAS_WIDTH, config.CANVAS_HEIGHT))

        # Network plumbing
        self.client = client or NetworkClient(config.API_BASE_URL, timeout=config.REQUEST_TIMEOUT)
        self.executor = executor or ThreadPoolExecutor(
            max_workers=config.IO_WORKERS,
            thread_name_prefix='nnviz-io'
        )
        self.store = StateStore()
        self.store.on_replace(self._on_state_replaced)
        self.dispatcher = CommandDispatcher(self.client, self.store, self.executor)
        self.synchronizer = StateSynchronizer(
            self.client, self.store, self.executor,
            interval_ms=config.POLL_INTERVAL_MS
        )

        # Drawing
        self.encoder = VisualEncoder(config)
        self.renderer = NetworkRenderer(config)
        self.hud = StatusHUD(config, self.encoder)

        # Local training inputs
        self.patterns = patterns if patterns is not None else PatternList.from_dicts(config.DEFAULT_PATTERNS)
        self.epochs = config.DEFAULT_EPOCHS

        self._build_panel()

        # Redraw bookkeeping
        self._needs_redraw = True
        self._positions: Optional[Positions] = None
        self._layout_key: Optional[Tuple[Tuple[int, ...], int, int]] = None

        self.running = True

    def _build_panel(self) -> None:
        """(Re)create the side panel widgets to the right of the canvas."""
        margin = 16
        panel_x = self.canvas.get_width() + margin
        panel_width = self.config.PANEL_WIDTH - margin * 2

        self.hud_origin = (panel_x, margin)
        self.controls = ControlPanel(panel_x, 210, panel_width)
        patterns_top = self.controls.bottom + margin
        self.pattern_panel = PatternPanel(
            self.patterns,
            panel_x,
            patterns_top,
            panel_width,
            self.screen.get_height() - patterns_top - margin * 2 - self.hud.legend_height
        )

    def _on_state_replaced(self, state: NetworkState, version: int) -> None:
        # Called from I/O workers; the main loop picks the flag up
        self._needs_redraw = True

    # =========================================================================
    # Main loop
    # =========================================================================

    def run(self) -> None:
        """Run until the window is closed."""
        _logger.info(f"Visualizer connecting to {self.client.base_url}")
        self.dispatcher.refresh()
        self.synchronizer.start()

        try:
            while self.running:
                self._handle_events()
                self._update_controls()
                self._render_frame()
                self.clock.tick(self.config.FPS)
        finally:
            self.shutdown()

    def shutdown(self) -> None:
        """Stop polling and drop results of requests still in flight."""
        self.synchronizer.stop()
        self.store.close()
        self.executor.shutdown(wait=False, cancel_futures=True)
        self.client.close()
        _logger.info("Visualizer closed")

    def _handle_events(self) -> None:
        """Handle pygame events and keyboard input."""
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.running = False
                continue

            if event.type == pygame.VIDEORESIZE:
                self._resize(event.w, event.h)
                continue

            if self.synchronizer.handle_event(event):
                continue

            if self.pattern_panel.handle_event(event):
                continue

            action = self.controls.handle_event(event)
            if action:
                self._perform(action)
                continue

            if event.type == pygame.KEYDOWN:
                if event.key in (pygame.K_ESCAPE, pygame.K_q):
                    self.running = False
                elif event.key == pygame.K_t:
                    self._perform('train')
                elif event.key == pygame.K_r:
                    self._perform('reset')
                elif event.key == pygame.K_a:
                    self._perform('add_pattern')
                elif event.key in (pygame.K_DELETE, pygame.K_BACKSPACE):
                    self._perform('remove_pattern')
                elif event.key in (pygame.K_PLUS, pygame.K_EQUALS, pygame.K_KP_PLUS):
                    self._perform('epochs_up')
                elif event.key in (pygame.K_MINUS, pygame.K_KP_MINUS):
                    self._perform('epochs_down')
                elif event.key == pygame.K_b:
                    self.renderer.show_bias = not self.renderer.show_bias
                    self._needs_redraw = True

    def _perform(self, action: str) -> None:
        """Run a control action (button click or shortcut)."""
        if action == 'train':
            if not len(self.patterns):
                _logger.info("Train ignored: no patterns")
                return
            self.dispatcher.train(self.patterns.items, self.epochs)
        elif action == 'reset':
            self.dispatcher.reset()
        elif action == 'add_pattern':
            self.pattern_panel.cancel_edit()
            self.patterns.add(state=self.store.state)
            self.pattern_panel.scroll_to_selection()
        elif action == 'remove_pattern':
            # Row indices shift, so an open edit would target the wrong pattern
            self.pattern_panel.cancel_edit()
            self.patterns.remove()
        elif action == 'epochs_up':
            self.epochs += self.config.EPOCH_STEP
        elif action == 'epochs_down':
            self.epochs = max(self.config.EPOCH_STEP, self.epochs - self.config.EPOCH_STEP)

    def _update_controls(self) -> None:
        """Grey out commands that can't run right now."""
        busy = self.dispatcher.training
        self.controls.set_enabled('train', not busy and len(self.patterns) > 0)
        self.controls.set_enabled('reset', not busy)
        self.controls.set_enabled('remove_pattern', len(self.patterns) > 0)

    def _resize(self, width: int, height: int) -> None:
        """Resize the window; only the layout is recomputed."""
        canvas_width = max(width - self.config.PANEL_WIDTH, self.min_canvas_width)
        canvas_height = max(height, self.min_canvas_height)
        self.pattern_panel.cancel_edit()
        self.screen = pygame.display.set_mode(
            (canvas_width + self.config.PANEL_WIDTH, canvas_height),
            pygame.RESIZABLE
        )
        self.canvas = pygame.Surface((canvas_width, canvas_height))
        self._build_panel()
        self._needs_redraw = True

    # =========================================================================
    # Rendering
    # =========================================================================

    def _layout_for(self, state: NetworkState) -> Positions:
        """Layout cached per (layer sizes, canvas size)."""
        key = (tuple(state.layer_sizes), self.canvas.get_width(), self.canvas.get_height())
        if self._positions is None or key != self._layout_key:
            self._positions = compute_layout(state.layers, self.canvas.get_width(), self.canvas.get_height())
            self._layout_key = key
        return self._positions

    def _render_canvas(self) -> None:
        state = self.store.state
        if state is None:
            self.canvas.fill(self.config.COLOR_BACKGROUND)
            font = pygame.font.Font(None, 28)
            text = font.render("Waiting for network service...", True, (120, 120, 120))
            self.canvas.blit(text, text.get_rect(center=self.canvas.get_rect().center))
            return

        positions = self._layout_for(state)
        self.renderer.render(self.canvas, state.layers, positions, self.encoder)

    def _render_frame(self) -> None:
        """Render one frame: canvas (only when stale) plus the side panel."""
        if self._needs_redraw:
            self._needs_redraw = False
            self._render_canvas()

        self.screen.fill(self.config.COLOR_PANEL)
        self.screen.blit(self.canvas, (0, 0))

        self.hud.render(
            self.screen,
            self.hud_origin[0],
            self.hud_origin[1],
            self.config.PANEL_WIDTH - 32,
            state=self.store.state,
            training=self.dispatcher.training,
            epochs=self.epochs,
            last_error=self.store.last_error,
            last_update_time=self.store.last_update_time,
        )
        self.controls.render(self.screen)
        self.pattern_panel.render(self.screen)
        self.hud.render_legend(self.screen, self.hud_origin[0], self.screen.get_height() - 16)

        pygame.display.flip()


def parse_layers(text: str) -> List[int]:
    """'2,4,1' -> [2, 4, 1]"""
    try:
        sizes = [int(part) for part in text.replace(' ', '').split(',') if part]
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid layer sizes: {text!r}")
    if len(sizes) < 2 or any(n <= 0 for n in sizes):
        raise argparse.ArgumentTypeError("Need at least two positive layer sizes, e.g. 2,4,1")
    return sizes


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Neural Network Visualizer - watch and steer a remotely trained network",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
EXAMPLES
========

    python main.py --serve                     Start the reference network service
    python main.py                             Open the visualizer (localhost:8080)
    python main.py --patterns xor.json         Train on patterns from a file
    python main.py --serve --layers 2,8,1      Serve a wider hidden layer
        """
    )

    parser.add_argument(
        '--serve', action='store_true',
        help='Run the reference network service instead of the visualizer'
    )

    # Visualizer options
    parser.add_argument(
        '--api-url', type=str, default=None,
        help='Network service base URL (default: http://localhost:8080)'
    )
    parser.add_argument(
        '--poll-interval', type=int, default=None,
        help='State poll period in milliseconds (default: 1000)'
    )
    parser.add_argument(
        '--timeout', type=float, default=None,
        help='Request timeout in seconds (default: none)'
    )
    parser.add_argument(
        '--epochs', type=int, default=None,
        help='Epochs per train command (default: 1000)'
    )
    parser.add_argument(
        '--patterns', type=str, default=None, metavar='FILE',
        help='JSON file with training patterns'
    )
    parser.add_argument(
        '--width', type=int, default=None,
        help='Canvas width (default: 800)'
    )
    parser.add_argument(
        '--height', type=int, default=None,
        help='Canvas height (default: 600)'
    )
    parser.add_argument(
        '--no-bias', action='store_true',
        help='Hide bias labels'
    )

    # Service options
    parser.add_argument(
        '--host', type=str, default=None,
        help='Service bind address (default: 127.0.0.1)'
    )
    parser.add_argument(
        '--port', type=int, default=None,
        help='Service port (default: 8080)'
    )
    parser.add_argument(
        '--layers', type=parse_layers, default=None,
        help='Service layer sizes, input first (default: 2,4,1)'
    )
    parser.add_argument(
        '--seed', type=int, default=None,
        help='Random seed for the service network'
    )

    # Other options
    parser.add_argument(
        '--log-level', type=str, default=None,
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
        help='Log verbosity (default: INFO)'
    )
    parser.add_argument(
        '--log-file', action='store_true',
        help='Also write logs to a file under logs/'
    )

    return parser.parse_args(argv)


def apply_args(config: Config, args: argparse.Namespace) -> Config:
    """Apply CLI overrides to config and re-validate."""
    if args.api_url:
        config.API_BASE_URL = args.api_url
    if args.poll_interval:
        config.POLL_INTERVAL_MS = args.poll_interval
    if args.timeout:
        config.REQUEST_TIMEOUT = args.timeout
    if args.epochs:
        config.DEFAULT_EPOCHS = args.epochs
    if args.width:
        config.CANVAS_WIDTH = args.width
    if args.height:
        config.CANVAS_HEIGHT = args.height
    if args.no_bias:
        config.SHOW_BIAS = False
    if args.host:
        config.SERVICE_HOST = args.host
    if args.port:
        config.SERVICE_PORT = args.port
    if args.layers:
        config.SERVICE_LAYER_SIZES = args.layers
    if args.seed is not None:
        config.SEED = args.seed
    if args.log_level:
        config.LOG_LEVEL = args.log_level
    if args.log_file:
        config.LOG_TO_FILE = True

    if args.api_url is None and args.port and not args.serve:
        config.API_BASE_URL = f"http://localhost:{args.port}"

    config.__post_init__()
    return config


def main(argv: Optional[List[str]] = None) -> None:
    """Main entry point."""
    args = parse_args(argv)
    config = apply_args(Config(), args)

    setup_logging(
        log_dir=config.LOG_DIR,
        level=LogLevel[config.LOG_LEVEL],
        file_output=config.LOG_TO_FILE,
        force=True,
    )

    if args.serve:
        from nnviz.service import run_service
        try:
            run_service(config)
        except KeyboardInterrupt:
            print("\nService stopped")
        return

    patterns = PatternList.load(args.patterns) if args.patterns else None

    app = VisualizerApp(config, patterns=patterns)
    try:
        app.run()
    except KeyboardInterrupt:
        print("\nInterrupted")
    finally:
        pygame.quit()


if __name__ == "__main__":
    main()
