"""Anti-AFK behavior scheduler.

Runs five independent cycles against one session: walking, jumping, looking
around, inventory fidgets, and sprint/sneak variations. Every cycle draws a
fresh random delay each round. The scheduler borrows the session between
start() and stop() and never touches it afterwards.
"""

from __future__ import annotations

import asyncio
import logging
import random
from dataclasses import dataclass
from typing import Callable

from afkbot.bots.timers import Sleep, TimerSet
from afkbot.config import MovementConfig
from afkbot.session.ports import CONTROLS, DIRECTIONS, Session


@dataclass(frozen=True)
class MovementStatus:
    is_moving: bool
    current_direction: str | None


class BehaviorScheduler:
    """Drives randomized control inputs for one spawned session."""

    def __init__(
        self,
        config: MovementConfig,
        *,
        rng: random.Random | None = None,
        sleep: Sleep = asyncio.sleep,
    ):
        self.config = config
        self.log = logging.getLogger("behavior")
        self._rng = rng or random.Random()
        self._timers = TimerSet(sleep=sleep)
        self._session: Session | None = None

        self.is_moving = False
        self.current_direction: str | None = None

    @property
    def running(self) -> bool:
        return self._timers.alive

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def start(self, session: Session) -> None:
        if self.running:
            self.stop()

        self.log.info("Starting anti-AFK movement pattern")
        self._session = session
        self._timers.open()

        cfg = self.config
        self._timers.spawn(self._movement_cycle())
        self._timers.repeat(
            lambda: self._duration(cfg.jump_min_ms, cfg.jump_max_ms), self._jump
        )
        self._timers.repeat(
            lambda: self._duration(cfg.look_min_ms, cfg.look_max_ms), self.look_around
        )
        self._timers.repeat(
            lambda: self._duration(cfg.inventory_min_ms, cfg.inventory_max_ms),
            self._fidget,
        )
        self._timers.repeat(
            lambda: self._duration(cfg.variation_min_ms, cfg.variation_max_ms),
            self._vary,
        )

    def stop(self) -> None:
        """Cancel every pending cycle and release all control inputs."""
        session = self._session
        if session is None and not self.running:
            return

        self.log.info("Stopping movement controller")
        self._timers.cancel()
        self._session = None
        self.is_moving = False
        self.current_direction = None

        if session is None:
            return
        for control in CONTROLS:
            try:
                session.set_control_state(control, False)
            except Exception as e:
                self.log.warning("Error releasing %s: %s", control, e)

    def status(self) -> MovementStatus:
        return MovementStatus(
            is_moving=self.is_moving,
            current_direction=self.current_direction,
        )

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _duration(self, low: int, high: int) -> int:
        return self._rng.randint(low, high)

    def _chance(self, probability: float) -> bool:
        return self._rng.random() < probability

    def _act(self, what: str, action: Callable[[Session], None]) -> bool:
        """Run one session action; failures are logged and contained."""
        session = self._session
        if session is None or not self.running:
            return False
        try:
            action(session)
        except Exception as e:
            self.log.error("Error %s: %s", what, e)
            return False
        return True

    def _hold(self, control: str, duration_ms: int) -> None:
        """Assert a control input, then release it after duration_ms."""
        pressed = self._act(
            f"toggling {control}", lambda s: s.set_control_state(control, True)
        )
        if pressed:
            self._timers.later(
                duration_ms,
                lambda: self._act(
                    f"toggling {control}",
                    lambda s: s.set_control_state(control, False),
                ),
            )

    # -------------------------------------------------------------------------
    # Movement
    # -------------------------------------------------------------------------

    async def _movement_cycle(self) -> None:
        cfg = self.config
        while self.running:
            await self._timers.wait_ms(self._duration(cfg.pause_min_ms, cfg.pause_max_ms))
            if not self.running:
                return
            walk_ms = self._begin_movement()
            if walk_ms is None:
                continue
            await self._timers.wait_ms(walk_ms)
            if not self.running:
                return
            self._clear_directions()

    def _begin_movement(self) -> int | None:
        session = self._session
        if session is None:
            return None
        try:
            ready = session.ready
        except Exception as e:
            self.log.error("Error checking session: %s", e)
            return None
        if not ready:
            return None

        self._clear_directions()

        cfg = self.config
        if self._chance(cfg.direction_change_chance) or self.current_direction is None:
            self.current_direction = self._rng.choice(DIRECTIONS)
        direction = self.current_direction

        if not self._act(
            "starting movement", lambda s: s.set_control_state(direction, True)
        ):
            return None
        self.is_moving = True

        walk_ms = self._duration(cfg.walk_min_ms, cfg.walk_max_ms)
        self.log.debug("Moving %s for %dms", direction, walk_ms)
        return walk_ms

    def _clear_directions(self) -> None:
        def release_all(session: Session) -> None:
            for direction in DIRECTIONS:
                session.set_control_state(direction, False)

        if self._act("stopping movement", release_all):
            self.is_moving = False

    # -------------------------------------------------------------------------
    # Periodic actions
    # -------------------------------------------------------------------------

    def _jump(self) -> None:
        session = self._session
        if session is None or not self.running:
            return
        try:
            if not session.on_ground:
                return
            session.set_control_state("jump", True)
        except Exception as e:
            self.log.error("Error executing jump: %s", e)
            return

        self._timers.later(
            self.config.jump_hold_ms,
            lambda: self._act(
                "releasing jump", lambda s: s.set_control_state("jump", False)
            ),
        )
        self.log.debug("Bot jumped")

    def look_around(self) -> None:
        cfg = self.config
        yaw = self._rng.uniform(-cfg.look_yaw_range, cfg.look_yaw_range)
        pitch = self._rng.uniform(-cfg.look_pitch_range, cfg.look_pitch_range)
        self._act("looking around", lambda s: s.look(yaw, pitch, False))

    def _fidget(self) -> None:
        cfg = self.config
        if self._chance(cfg.inventory_jiggle_chance):
            self.log.debug("Opening inventory")
            delta = cfg.inventory_jiggle_rad
            nudged = self._act(
                "performing inventory action",
                lambda s: s.look(s.yaw + delta, s.pitch - delta, False),
            )
            if nudged:
                self._timers.later(
                    cfg.inventory_jiggle_revert_ms,
                    lambda: self._act(
                        "performing inventory action",
                        lambda s: s.look(s.yaw - delta, s.pitch + delta, False),
                    ),
                )

        if self._chance(cfg.inventory_sneak_chance):
            self._hold(
                "sneak",
                self._duration(cfg.inventory_sneak_min_ms, cfg.inventory_sneak_max_ms),
            )

    def _vary(self) -> None:
        if not self.is_moving:
            return

        cfg = self.config
        if self._chance(cfg.variation_sprint_chance):
            self._hold(
                "sprint",
                self._duration(cfg.variation_sprint_min_ms, cfg.variation_sprint_max_ms),
            )

        if self._chance(cfg.variation_look_chance):
            self.look_around()

        if self._chance(cfg.variation_sneak_chance):
            self._hold(
                "sneak",
                self._duration(cfg.variation_sneak_min_ms, cfg.variation_sneak_max_ms),
            )
