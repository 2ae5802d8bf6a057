# main.py
"""
Main entry point for the Lightning Storm effect.

This script orchestrates the entire run:
1. Loads configuration from `config.json`.
2. Initializes the logging system.
3. Opens the drawing surface (a window, or an offscreen surface).
4. Attaches the lightning effect and runs the frame loop.
5. Handles clean shutdown.
"""
import logging
from utils import setup_logging, load_config
import cProfile
import pstats
import io


def main():
    """
    The main function to run the effect.
    """
    # Logging is not set up yet, so we use a print for this one error.
    try:
        config = load_config('config.json')
    except Exception as e:
        print(f"FATAL: Could not load config.json. Error: {e}")
        return

    setup_logging(config)

    logging.info("--- Lightning Storm Starting ---")

    window_params = config.get('window', {})
    run_params = config.get('run_control', {})
    lightning_params = config.get('lightning', {})

    from config import ConfigError
    from effect import attach
    from visualization import PygameSurfaceAdapter, OffscreenSurfaceAdapter
    from constants import WINDOW_WIDTH, WINDOW_HEIGHT, FULLSCREEN

    width = window_params.get('width', WINDOW_WIDTH)
    height = window_params.get('height', WINDOW_HEIGHT)

    # --- Component Initialization ---
    if window_params.get('headless', False):
        adapter = OffscreenSurfaceAdapter(width, height)
    else:
        adapter = PygameSurfaceAdapter(
            width=width,
            height=height,
            fullscreen=window_params.get('fullscreen', FULLSCREEN),
        )

    try:
        effect = attach(adapter, lightning_params)
    except ConfigError as e:
        logging.critical(f"Invalid lightning configuration: {e}")
        adapter.close()
        return

    if effect is None:
        logging.error("Drawing surface never became ready. Nothing to run.")
        adapter.close()
        return

    log_throttle = run_params.get('log_throttle_steps', 300)
    max_steps = run_params.get('max_steps', 0)  # 0 runs until the window is closed
    if max_steps == 0 and window_params.get('headless', False):
        logging.warning("Headless runs need max_steps; defaulting to 600 frames.")
        max_steps = 600
    profiler = cProfile.Profile() if run_params.get('profile', False) else None

    running = True
    step_num = 0

    if profiler:
        profiler.enable()
    try:
        while running:
            if not adapter.run_frame():
                running = False
                break
            step_num += 1

            # Hot loops must throttle logs; 0 disables the periodic stats.
            if log_throttle and step_num % log_throttle == 0:
                stats = effect.simulation.stats()
                logging.info(
                    f"Frame {step_num} | Active bolts: {stats['active_bolts']} | "
                    f"Trails: {stats['trails']}"
                )
                logging.debug(f"Frame {step_num} | Storms so far: {stats['storms']}")

            if max_steps and step_num >= max_steps:
                logging.info(f"Reached max_steps ({max_steps}). Stopping.")
                running = False
    except ConfigError as e:
        logging.critical(f"Lightning effect stopped at frame {step_num}: {e}")
    finally:
        if profiler:
            profiler.disable()
        effect()
        adapter.close()
    logging.info(f"Frame loop finished after {step_num} frames.")

    if profiler:
        logging.info("--- Performance Profile ---")
        s = io.StringIO()
        # Sort by cumulative time spent in the function
        stats = pstats.Stats(profiler, stream=s).sort_stats('cumtime')
        stats.print_stats(20)
        logging.info(f"\n{s.getvalue()}")

    logging.info("--- Lightning Storm Shutting Down ---")


if __name__ == "__main__":
    main()
