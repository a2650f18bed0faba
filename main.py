# main.py
"""
Main entry point for the black hole star field.

This script orchestrates the entire lifecycle:
1. Loads configuration from `config.json`.
2. Initializes the logging system.
3. Opens the window and builds the surface, field and stars.
4. Runs the render loop.
5. Handles clean shutdown.
"""
import logging
import cProfile
import pstats
import io
import sys

from utils import setup_logging, load_config


def main(config_path: str = 'config.json') -> None:
    """
    The main function to run the renderer.
    """
    # Load configuration from the JSON file first.
    # Logging is not set up yet, so we use a print for this one error.
    try:
        config = load_config(config_path)
    except Exception as e:
        print(f"FATAL: Could not load {config_path}. Error: {e}")
        return

    setup_logging(config)

    logging.info("--- Black Hole Starting ---")

    sim_params = config.get('simulation_parameters', {})
    run_params = config.get('run_control', {})

    from universe import Universe
    from utils import validate_visualization_params
    from visualization import CanvasSurface, create_window, close_window

    vis_params = validate_visualization_params(config.get('visualization', {}))

    # --- Component Initialization ---
    # 1. The window determines the logical surface size.
    display = create_window(vis_params['window_width'], vis_params['window_height'])
    width, height = display.get_size()

    # 2. The surface and the controller, which builds the field and its stars.
    surface = CanvasSurface(width, height, vis_params['dpi'], vis_params['background_color'])
    universe = Universe(
        surface,
        sim_params,
        vis_params,
        display=display,
        log_throttle=run_params.get('log_throttle_frames', 300),
    )

    # --- Profiler Setup (Rule 11) ---
    profiler = cProfile.Profile()

    profiler.enable()
    try:
        frames = universe.start(max_frames=run_params.get('max_frames'))
    finally:
        profiler.disable()
        universe.stop()
        close_window()
    logging.info(f"Render loop finished after {frames} frames.")

    # --- Performance Profile Output (Rule 11 & 2) ---
    logging.info("--- Performance Profile ---")
    s = io.StringIO()
    # Sort by cumulative time spent in the function
    stats = pstats.Stats(profiler, stream=s).sort_stats('cumtime')
    stats.print_stats(20)
    logging.info(f"\n{s.getvalue()}")

    logging.info("--- Black Hole Shutting Down ---")


if __name__ == "__main__":
    main(*sys.argv[1:2])
