# scheduler.py
"""
Decides, once per tick, whether a new storm of bolts should be created.
"""
import logging
from rng import RandomSource

# --- Data Contracts ---
#
# class SpawnScheduler:
#   - __init__(self, min_delay: int, max_delay: int, rng: RandomSource)
#     - Side Effects: Draws the first storm threshold.
#
#   - tick(self) -> bool
#     - Outputs: True on the tick a storm is due.
#     - Side Effects: Advances the elapsed counter. When a storm is due the
#       counter resets to 0 and a fresh threshold is drawn.
#     - Invariants: min_delay <= ticks_until_next_storm <= max_delay.

class SpawnScheduler:
    """
    Countdown between storms, redrawn from [min_delay, max_delay] after each.
    """
    def __init__(self, min_delay: int, max_delay: int, rng: RandomSource):
        self.min_delay = min_delay
        self.max_delay = max_delay
        self.rng = rng
        self.elapsed_ticks = 0
        self.ticks_until_next_storm = self._draw_delay()

    def _draw_delay(self) -> int:
        return self.rng.integer(self.min_delay, self.max_delay)

    def tick(self) -> bool:
        self.elapsed_ticks += 1
        if self.elapsed_ticks < self.ticks_until_next_storm:
            return False

        logging.debug(f"Storm due after {self.elapsed_ticks} ticks.")
        self.elapsed_ticks = 0
        self.ticks_until_next_storm = self._draw_delay()
        return True
