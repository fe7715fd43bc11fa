# main.py
"""
Main entry point for the network background.

This script orchestrates the whole lifecycle:
1. Loads configuration from `config.json`.
2. Initializes the logging system.
3. Opens the window and sets up the network background.
4. Runs the frame loop.
5. Handles clean shutdown.
"""
import logging
import sys
from utils import setup_logging, load_config
import numpy as np
import cProfile
import pstats
import io

def main(config_path: str = 'config.json'):
    """
    The main function to run the network background.
    """
    # Logging is not set up yet, so we use a print for this one error.
    try:
        config = load_config(config_path)
    except Exception as e:
        print(f"FATAL: Could not load {config_path}. Error: {e}")
        return

    setup_logging(config)

    logging.info("--- Network Background Starting ---")

    run_params = config.get('run_control', {})
    display_params = config.get('display', {})

    from settings import NetworkSettings
    from network import NetworkBackground
    from visualization import Visualizer

    try:
        settings = NetworkSettings.from_config(config.get('network', {}))
    except ValueError:
        logging.critical("Invalid network settings. Exiting.")
        return

    # --- Component Initialization ---
    # 1. The visualizer opens the window and determines the viewport size.
    visualizer = Visualizer(display_params)

    # 2. The effect seeds its particles for that viewport.
    background = NetworkBackground(visualizer, settings)
    background.start()

    def log_average_speed(frame: int) -> None:
        if background.particles.particle_count:
            avg_speed = np.mean(background.particles.speeds())
            logging.debug(f"Frame {frame} | Average Speed: {avg_speed:.4f}")

    profiler = cProfile.Profile() if run_params.get('profile', False) else None

    if profiler is not None:
        profiler.enable()
    frames = visualizer.run(
        max_frames=run_params.get('max_frames'),
        log_throttle=run_params.get('log_throttle_frames', 100),
        on_throttle=log_average_speed
    )
    if profiler is not None:
        profiler.disable()

    background.dispose()
    visualizer.close()
    logging.info(f"Frame loop finished after {frames} frames.")

    if profiler is not None:
        logging.info("--- Performance Profile ---")
        s = io.StringIO()
        # Sort by cumulative time spent in the function
        stats = pstats.Stats(profiler, stream=s).sort_stats('cumtime')
        stats.print_stats(20)
        logging.info(f"\n{s.getvalue()}")

    logging.info("--- Network Background Shutting Down ---")


if __name__ == "__main__":
    main(*sys.argv[1:2])
