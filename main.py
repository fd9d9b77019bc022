# main.py
"""
Main entry point for the credit field application.

This script orchestrates the application lifecycle:
1. Loads configuration from `config.json`.
2. Initializes the logging system.
3. Opens the window and sets up the earth sphere and the credit field.
   A component that fails to set up is logged and left out; the other
   one still runs.
4. Runs the frame loop until the user quits or the credit redirects.
5. Handles clean shutdown.
"""
import logging
import webbrowser
from utils import setup_logging, load_config
import numpy as np
import pygame
import cProfile
import pstats
import io
from constants import (
    CREDIT_TEXT, DEFAULT_WINDOW_SIZE, EARTH_GRID_N, EARTH_NOISE_RADIUS,
    FONT_BOLD, FPS, FULLSCREEN, REDIRECT_URL
)

def main():
    """
    The main function to run the application.
    """
    # Logging is not set up yet, so we use a print for this one error.
    try:
        config = load_config('config.json')
    except Exception as e:
        print(f"FATAL: Could not load config.json. Error: {e}")
        return

    setup_logging(config)

    logging.info("--- Credit Field Starting ---")

    credit_params = config.get('credit', {})
    earth_params = config.get('earth', {})
    run_params = config.get('run_control', {})

    from credit_link import CreditLink
    from earth import EarthSphere
    from text_sampler import PygameTextRasterizer, TextSampler
    from timers import TimerQueue
    from visualization import Visualizer

    # A single master seed drives every random draw.
    rng = np.random.default_rng(run_params.get('seed'))

    visualizer = Visualizer(
        window_size=tuple(run_params.get('window_size', DEFAULT_WINDOW_SIZE)),
        fullscreen=run_params.get('fullscreen', FULLSCREEN),
        fps=run_params.get('fps', FPS)
    )
    timers = TimerQueue()

    open_browser = run_params.get('open_browser', True)
    redirected = []

    def navigate(url):
        if open_browser:
            webbrowser.open(url)
        else:
            logging.info(f"Browser disabled in config; not opening {url}.")
        redirected.append(url)

    credit = None
    try:
        sampler = TextSampler(
            PygameTextRasterizer(bold=credit_params.get('bold', FONT_BOLD)),
            pixel_ratio=credit_params.get('pixel_ratio', 1.0)
        )
        credit = CreditLink(
            sampler,
            timers,
            text=credit_params.get('text', CREDIT_TEXT),
            redirect_url=credit_params.get('redirect_url', REDIRECT_URL),
            navigate=navigate,
            clock=pygame.time.get_ticks,
            rng=rng,
            font_size=credit_params.get('font_size')
        ).initialize(visualizer.size)
    except Exception as e:
        logging.error(f"Error initializing credit link: {e}")

    earth = None
    if earth_params.get('enabled', True):
        try:
            earth = EarthSphere(
                grid_n=earth_params.get('grid_n', EARTH_GRID_N),
                noise_radius=earth_params.get('noise_radius', EARTH_NOISE_RADIUS),
                rng=rng
            )
            earth.resize(visualizer.size)
        except Exception as e:
            logging.error(f"Error initializing earth sphere: {e}")
            earth = None

    visualizer.attach(credit, earth)

    profiler = cProfile.Profile()

    log_throttle = run_params.get('log_throttle_frames', 600)
    max_frames = run_params.get('max_frames', 0)

    running = True
    frame_num = 0

    profiler.enable()
    while running:
        now = pygame.time.get_ticks()
        timers.run_due(now)
        if redirected:
            logging.info(f"Redirected to {redirected[0]}. Stopping frame loop.")
            break

        if not visualizer.draw(now):
            running = False
        frame_num += 1

        # Hot loops must throttle logs
        if log_throttle and frame_num % log_throttle == 0:
            logging.info(f"Frame {frame_num} ({visualizer.clock.get_fps():.1f} fps)")
            if credit is not None and len(credit.particles) > 0:
                avg_speed = np.mean(np.linalg.norm(credit.particles.velocities, axis=1))
                logging.debug(
                    f"Frame {frame_num} | State: {credit.state.value} | "
                    f"Average particle speed: {avg_speed:.4f}"
                )

        if max_frames and frame_num >= max_frames:
            logging.info(f"Reached max_frames ({max_frames}). Stopping.")
            running = False
    profiler.disable()

    if credit is not None:
        credit.close()
    visualizer.close()
    logging.info("Frame loop finished.")

    logging.info("--- Performance Profile ---")
    s = io.StringIO()
    # Sort by cumulative time spent in the function
    stats = pstats.Stats(profiler, stream=s).sort_stats('cumtime')
    stats.print_stats(20)
    logging.info(f"\n{s.getvalue()}")

    logging.info("--- Credit Field Shutting Down ---")


if __name__ == "__main__":
    main()
