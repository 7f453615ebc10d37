"""
Core Game
=========

Session state machine tying together physics, spawning, collision and scoring.
"""

from __future__ import annotations

import itertools
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

from tapjump.core.config_loader import GameConfig, get_config
from tapjump.core.obstacle_catalog import ObstacleCatalog, get_catalog
from tapjump.core.physics import PlayerPhysics, PlayerState
from tapjump.core.spawner import ObstacleSpawner, ObstacleInstance, SpawnEvent
from tapjump.core.collision import CollisionEngine
from tapjump.core.scoring import ScoreTracker, ScoreEvent
from tapjump.core.scheduler import SimScheduler, TimerHandle
from tapjump.core.rng import SpawnRng
from tapjump.core.state_snapshot import (
    SnapshotBuilder,
    GameSnapshot,
    PHASE_IDLE,
    PHASE_RUNNING,
    PHASE_ENDED,
)


class GamePhase(str, Enum):
    """Session phase."""
    IDLE = "idle"
    RUNNING = "running"
    ENDED = "ended"

    @property
    def code(self) -> int:
        return _PHASE_CODES[self]


_PHASE_CODES = {
    GamePhase.IDLE: PHASE_IDLE,
    GamePhase.RUNNING: PHASE_RUNNING,
    GamePhase.ENDED: PHASE_ENDED,
}


@dataclass
class TickResult:
    """Result of a single simulation tick."""
    tick: int
    phase: GamePhase
    landed: bool = False
    spawned: List[SpawnEvent] = field(default_factory=list)
    removed: List[ObstacleInstance] = field(default_factory=list)
    score_events: List[ScoreEvent] = field(default_factory=list)
    collided: bool = False

    @property
    def delta_score(self) -> int:
        return len(self.score_events)


class CoreGame:
    """
    Main game simulation class.

    Phases: IDLE -> RUNNING on the first tap, RUNNING -> ENDED on collision,
    ENDED -> RUNNING on the next tap. A tap while RUNNING is a jump.

    One tick:
    1. Advance the simulation clock (due spawn timers fire)
    2. Integrate player physics
    3. Resample obstacles and remove finished ones, scheduling a respawn
    4. Pass scoring and collision

    At most one spawn is pending at a time. The pending spawn is identified by
    a token; starting or ending a session clears the token and cancels every
    timer, so callbacks from an earlier session are dropped.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        seed: Optional[int] = None,
        render_callback: Optional[Callable[[], None]] = None
    ):
        """
        Initialize game.

        Args:
            config: Game configuration. Uses default if None.
            seed: Random seed for reproducibility.
            render_callback: Optional callback invoked after every running tick.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._seed = seed
        self._render_callback = render_callback
        self._tick_ms = config.physics.tick_ms

        # Initialize subsystems
        self._catalog = get_catalog(config)
        self._scheduler = SimScheduler()
        self._rng = SpawnRng(config.spawn.pattern_probability, seed)
        self._physics = PlayerPhysics(config)
        self._player = self._physics.new_player()
        self._spawner = ObstacleSpawner(config, rng=self._rng, catalog=self._catalog)
        self._scorer = ScoreTracker(config)
        self._collision = CollisionEngine(self._scorer, config)
        self._snapshot_builder = SnapshotBuilder(config)

        # Session state
        self._phase = GamePhase.IDLE
        self._tick_count: int = 0
        self._session_id: int = 0
        self._sessions_played: int = 0

        # Pending spawn token
        self._token_counter = itertools.count(1)
        self._pending_token: Optional[int] = None
        self._pending_handle: Optional[TimerHandle] = None

        # Spawn events produced during the current tick
        self._tick_spawns: List[SpawnEvent] = []

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def config(self) -> GameConfig:
        """Game configuration."""
        return self._config

    @property
    def catalog(self) -> ObstacleCatalog:
        return self._catalog

    @property
    def phase(self) -> GamePhase:
        return self._phase

    @property
    def started(self) -> bool:
        """True once a session has been started (running or ended)."""
        return self._phase != GamePhase.IDLE

    @property
    def is_running(self) -> bool:
        return self._phase == GamePhase.RUNNING

    @property
    def is_over(self) -> bool:
        """True if the current session has ended."""
        return self._phase == GamePhase.ENDED

    @property
    def score(self) -> int:
        return self._scorer.score

    @property
    def high_score(self) -> int:
        return self._scorer.high_score

    @property
    def difficulty(self) -> float:
        return self._scorer.difficulty

    @property
    def player(self) -> PlayerState:
        return self._player

    @property
    def physics(self) -> PlayerPhysics:
        return self._physics

    @property
    def spawner(self) -> ObstacleSpawner:
        return self._spawner

    @property
    def obstacles(self) -> List[ObstacleInstance]:
        """Live obstacles. Read-only for callers."""
        return self._spawner.live

    @property
    def scheduler(self) -> SimScheduler:
        return self._scheduler

    @property
    def now_ms(self) -> float:
        """Simulation time since the session started."""
        return self._scheduler.now_ms

    @property
    def tick_count(self) -> int:
        """Ticks simulated in the current session."""
        return self._tick_count

    @property
    def session_id(self) -> int:
        return self._session_id

    @property
    def sessions_played(self) -> int:
        return self._sessions_played

    @property
    def spawn_pending(self) -> bool:
        """True while a spawn is scheduled but has not fired."""
        return self._pending_token is not None

    # ------------------------------------------------------------------
    # Input
    # ------------------------------------------------------------------

    def tap(self) -> str:
        """
        Handle a tap.

        Returns:
            "jump" if the player jumped, "start" if a new session began.
        """
        if self._phase == GamePhase.RUNNING:
            self._physics.jump(self._player)
            return "jump"
        self.start()
        return "start"

    def jump(self) -> bool:
        """
        Jump if a session is running.

        Returns:
            True if the jump was applied.
        """
        if self._phase != GamePhase.RUNNING:
            return False
        self._physics.jump(self._player)
        return True

    # ------------------------------------------------------------------
    # Session lifecycle
    # ------------------------------------------------------------------

    def start(self) -> None:
        """Begin a new session. High score carries over."""
        self._invalidate_pending()
        self._scheduler.reset()
        self._spawner.clear()
        self._scorer.reset()
        self._collision.reset()
        self._physics.reset(self._player)

        self._session_id += 1
        self._sessions_played += 1
        self._tick_count = 0
        self._tick_spawns = []
        self._phase = GamePhase.RUNNING

        self._schedule_spawn(self._config.spawn.initial_delay_ms)

    def reset(self, seed: Optional[int] = None) -> GameSnapshot:
        """
        Return to IDLE with an empty field.

        Args:
            seed: New random seed. Keeps the current RNG state if None.

        Returns:
            Initial game snapshot.
        """
        if seed is not None:
            self._seed = seed
            self._rng.reset(seed)

        self._invalidate_pending()
        self._scheduler.reset()
        self._spawner.clear()
        self._scorer.reset()
        self._collision.reset()
        self._physics.reset(self._player)

        self._session_id += 1
        self._tick_count = 0
        self._tick_spawns = []
        self._phase = GamePhase.IDLE

        return self.snapshot()

    def _end(self) -> None:
        """Stop the session after a collision."""
        self._phase = GamePhase.ENDED
        self._spawner.freeze(self._scheduler.now_ms)
        self._invalidate_pending()
        self._scheduler.cancel_all()

    # ------------------------------------------------------------------
    # Spawn scheduling
    # ------------------------------------------------------------------

    def _schedule_spawn(self, delay_ms: float) -> bool:
        """
        Schedule the next spawn unless one is already pending.

        Returns:
            True if a spawn was scheduled.
        """
        if self._pending_token is not None:
            return False

        token = next(self._token_counter)
        session_id = self._session_id
        self._pending_token = token
        self._pending_handle = self._scheduler.call_later(
            delay_ms,
            lambda: self._on_spawn_timer(token, session_id)
        )
        return True

    def _on_spawn_timer(self, token: int, session_id: int) -> None:
        """Timer callback. Ignored unless it holds the current token."""
        if token != self._pending_token or session_id != self._session_id:
            return
        self._pending_token = None
        self._pending_handle = None

        if self._phase != GamePhase.RUNNING:
            return

        event = self._spawner.spawn_event(self._scheduler.now_ms, self._scorer.difficulty)
        self._tick_spawns.append(event)

    def _invalidate_pending(self) -> None:
        if self._pending_handle is not None:
            self._pending_handle.cancel()
        self._pending_handle = None
        self._pending_token = None

    # ------------------------------------------------------------------
    # Simulation
    # ------------------------------------------------------------------

    def tick(self) -> TickResult:
        """
        Advance the simulation by one fixed tick.

        Does nothing unless a session is running.

        Returns:
            TickResult describing what happened.
        """
        if self._phase != GamePhase.RUNNING:
            return TickResult(tick=self._tick_count, phase=self._phase)

        self._tick_spawns = []
        self._scheduler.advance(self._tick_ms)
        now = self._scheduler.now_ms

        landed = self._physics.tick(self._player)

        sweep = self._spawner.sweep(now)
        if sweep.respawn_triggers:
            self._schedule_spawn(self._spawner.respawn_delay(self._scorer.difficulty))

        frame = self._collision.check_frame(self._player, self._spawner.live)
        if frame.collided:
            self._end()

        self._tick_count += 1

        result = TickResult(
            tick=self._tick_count,
            phase=self._phase,
            landed=landed,
            spawned=self._tick_spawns,
            removed=sweep.removed,
            score_events=frame.score_events,
            collided=frame.collided
        )

        if self._render_callback is not None:
            self._render_callback()

        return result

    def run(self, ticks: int, tap_at: Optional[set] = None) -> List[TickResult]:
        """
        Run several ticks, optionally tapping before given tick indices.

        Stops early if the session ends.

        Args:
            ticks: Maximum number of ticks.
            tap_at: Tick indices (0-based, relative to this call) to tap before.

        Returns:
            List of tick results.
        """
        results = []
        for i in range(ticks):
            if tap_at and i in tap_at:
                self.jump()
            result = self.tick()
            results.append(result)
            if result.phase != GamePhase.RUNNING:
                break
        return results

    # ------------------------------------------------------------------
    # Render adapter boundary
    # ------------------------------------------------------------------

    def snapshot(self) -> GameSnapshot:
        """Build current game state snapshot."""
        return self._snapshot_builder.build(
            phase=self._phase.code,
            player=self._player,
            obstacles=self._spawner.live,
            score=self._scorer.score,
            high_score=self._scorer.high_score,
            difficulty=self._scorer.difficulty,
            tick=self._tick_count,
            time_ms=self._scheduler.now_ms
        )

    def get_info(self) -> Dict[str, Any]:
        """Get additional info dict for Gymnasium."""
        return {
            "phase": self._phase.value,
            "score": self._scorer.score,
            "high_score": self._scorer.high_score,
            "difficulty": self._scorer.difficulty,
            "tick": self._tick_count,
            "obstacles": self._spawner.count,
            "spawned_total": self._spawner.spawned_total,
            "spawn_pending": self.spawn_pending,
        }

    def get_render_data(self) -> Dict[str, Any]:
        """
        Get data needed for rendering.

        Returns:
            Dict with player, obstacles, session and board info.
        """
        ground_y = self._config.ground_y
        obstacles_data = []
        for obstacle in self._spawner.live:
            top, bottom = obstacle.archetype.vertical_span(ground_y)
            obstacles_data.append({
                "uid": obstacle.uid,
                "type_id": obstacle.archetype.id,
                "x": obstacle.x,
                "top": top,
                "bottom": bottom,
                "width": obstacle.width,
                "height": obstacle.archetype.height,
                "color": obstacle.archetype.color,
                "passed": obstacle.passed,
            })

        return {
            "screen_width": self._config.screen.width,
            "screen_height": self._config.screen.height,
            "ground_y": ground_y,
            "player": {
                "x": self._player.x,
                "y": self._player.y,
                "width": self._player.width,
                "height": self._player.height,
                "velocity": self._player.velocity,
            },
            "obstacles": obstacles_data,
            "phase": self._phase.value,
            "started": self.started,
            "ended": self.is_over,
            "score": self._scorer.score,
            "high_score": self._scorer.high_score,
            "difficulty": self._scorer.difficulty,
        }
