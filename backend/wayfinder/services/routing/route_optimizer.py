"""Route optimizer — orders chosen venues to minimize straight-line travel distance.

Construction: nearest-neighbor tour from the pinned start point.
Refinement:   2-opt (segment reversal) accepting strictly shorter paths, run
              from both the nearest-neighbor tour and the input order; the
              shorter result wins.

Runtime is bounded by a move cap (factor * n^2 accepted reversals) and by an
optional timeout or cancel event. On cancellation the best order found so far
is returned with ``cancelled`` set.
"""

import logging
import math
import threading
import time
from dataclasses import dataclass, field

from wayfinder.config import settings
from wayfinder.exceptions import InvalidInput
from wayfinder.schemas.route import RoutePoint
from wayfinder.services.routing.geo import haversine_meters

logger = logging.getLogger(__name__)

MIN_POINTS_TO_OPTIMIZE = 3
IMPROVEMENT_EPSILON = 1e-9  # meters; smaller gains are float noise


# ---------- Config ----------


@dataclass(frozen=True)
class ModeSpeeds:
    """Average door-to-door speed per travel mode (km/h)."""
    walking: float = 5.0
    driving: float = 40.0
    transit: float = 20.0

    def meters_per_second(self, mode: str) -> float:
        kmh = {"walking": self.walking, "driving": self.driving, "transit": self.transit}.get(mode)
        if kmh is None:
            raise InvalidInput(f"Unknown travel mode {mode!r}")
        return kmh / 3.6


@dataclass(frozen=True)
class OptimizerConfig:
    speeds: ModeSpeeds = field(default_factory=ModeSpeeds)
    iteration_factor: int = 1            # accepted-move cap = factor * n^2
    timeout_seconds: float | None = None

    @classmethod
    def from_settings(cls) -> "OptimizerConfig":
        return cls(
            speeds=ModeSpeeds(
                walking=settings.walking_speed_kmh,
                driving=settings.driving_speed_kmh,
                transit=settings.transit_speed_kmh,
            ),
            iteration_factor=settings.two_opt_iteration_factor,
            timeout_seconds=settings.optimizer_timeout_seconds,
        )


# ---------- Data structures ----------


@dataclass(frozen=True)
class RouteSegment:
    from_point: RoutePoint
    to_point: RoutePoint
    distance_meters: float
    duration_seconds: float
    mode: str = "walking"

    def to_dict(self) -> dict:
        return {
            "from": self.from_point.model_dump(),
            "to": self.to_point.model_dump(),
            "distance_meters": round(self.distance_meters, 1),
            "duration_seconds": round(self.duration_seconds, 1),
            "mode": self.mode,
        }


@dataclass(frozen=True)
class Route:
    """A fully computed route. Rebuilt from scratch on every call."""
    points: list[RoutePoint]
    segments: list[RouteSegment]
    total_distance_meters: float
    total_duration_seconds: float
    optimized: bool = False
    cancelled: bool = False

    def to_dict(self) -> dict:
        return {
            "points": [p.model_dump() for p in self.points],
            "segments": [s.to_dict() for s in self.segments],
            "total_distance_meters": round(self.total_distance_meters, 1),
            "total_duration_seconds": round(self.total_duration_seconds, 1),
            "optimized": self.optimized,
            "cancelled": self.cancelled,
        }


def path_distance(points: list[RoutePoint]) -> float:
    """Sum of haversine legs along ``points`` in the given order (open path)."""
    return math.fsum(
        haversine_meters(a.latitude, a.longitude, b.latitude, b.longitude)
        for a, b in zip(points, points[1:])
    )


# ---------- Optimizer ----------


class _Deadline:
    """Combined timeout / cancel-event check."""

    def __init__(self, timeout_seconds: float | None, cancel_event: threading.Event | None):
        self._expires = time.monotonic() + timeout_seconds if timeout_seconds is not None else None
        self._event = cancel_event
        self.hit = False

    def expired(self) -> bool:
        if not self.hit:
            if self._event is not None and self._event.is_set():
                self.hit = True
            elif self._expires is not None and time.monotonic() >= self._expires:
                self.hit = True
        return self.hit


class RouteOptimizer:
    """Pure, per-call route sequencing; holds no state between calls."""

    def __init__(self, config: OptimizerConfig | None = None):
        self.config = config or OptimizerConfig.from_settings()

    def optimize(
        self,
        points: list[RoutePoint],
        timeout_seconds: float | None = None,
        cancel_event: threading.Event | None = None,
    ) -> list[RoutePoint]:
        """Return a permutation of ``points`` with the start pinned first."""
        ordered, _ = self._optimize(points, timeout_seconds, cancel_event)
        return ordered

    def metrics(self, points: list[RoutePoint], mode: str = "walking") -> dict:
        """Total distance and duration of ``points`` in the given order."""
        route = self.build_route(points, mode)
        return {
            "total_distance_meters": route.total_distance_meters,
            "total_duration_seconds": route.total_duration_seconds,
        }

    def build_route(
        self,
        points: list[RoutePoint],
        mode: str = "walking",
        optimized: bool = False,
        cancelled: bool = False,
    ) -> Route:
        """Segments and totals for ``points`` in the given order."""
        speeds = self.config.speeds
        speeds.meters_per_second(mode)  # validate default mode even with < 2 points

        segments = []
        for a, b in zip(points, points[1:]):
            seg_mode = b.arrival_mode or mode
            distance = haversine_meters(a.latitude, a.longitude, b.latitude, b.longitude)
            segments.append(RouteSegment(
                from_point=a,
                to_point=b,
                distance_meters=distance,
                duration_seconds=distance / speeds.meters_per_second(seg_mode),
                mode=seg_mode,
            ))

        return Route(
            points=list(points),
            segments=segments,
            total_distance_meters=math.fsum(s.distance_meters for s in segments),
            total_duration_seconds=math.fsum(s.duration_seconds for s in segments),
            optimized=optimized,
            cancelled=cancelled,
        )

    def plan(
        self,
        points: list[RoutePoint],
        mode: str = "walking",
        optimize: bool = True,
        timeout_seconds: float | None = None,
        cancel_event: threading.Event | None = None,
    ) -> Route:
        """Optimize (unless disabled) and compute the full route."""
        if not optimize:
            return self.build_route(points, mode)
        ordered, cancelled = self._optimize(points, timeout_seconds, cancel_event)
        return self.build_route(
            ordered,
            mode,
            optimized=len(points) >= MIN_POINTS_TO_OPTIMIZE,
            cancelled=cancelled,
        )

    # ---- Internals ----

    def _optimize(
        self,
        points: list[RoutePoint],
        timeout_seconds: float | None,
        cancel_event: threading.Event | None,
    ) -> tuple[list[RoutePoint], bool]:
        n = len(points)
        if n < MIN_POINTS_TO_OPTIMIZE:
            return list(points), False

        started = time.perf_counter()
        deadline = _Deadline(
            timeout_seconds if timeout_seconds is not None else self.config.timeout_seconds,
            cancel_event,
        )

        start, end = _pinned_indices(points)
        middle = [i for i in range(n) if i != start and i != end]
        tail = [end] if end is not None else []
        input_seed = [start] + middle + tail

        if deadline.expired():
            logger.warning(f"Route optimization cancelled before construction ({n} points)")
            return [points[i] for i in input_seed], True

        dist = _distance_matrix(points)
        max_moves = max(1, self.config.iteration_factor * n * n)
        last_movable = n - 2 if end is not None else n - 1

        nn_seed = [start] + _nearest_neighbor(start, middle, dist) + tail
        best = _two_opt(nn_seed, dist, last_movable, max_moves, deadline)
        best_len = _tour_length(best, dist)

        if input_seed != nn_seed and not deadline.expired():
            alt = _two_opt(input_seed, dist, last_movable, max_moves, deadline)
            alt_len = _tour_length(alt, dist)
            if alt_len < best_len - IMPROVEMENT_EPSILON:
                best, best_len = alt, alt_len

        input_len = _tour_length(input_seed, dist)
        if input_len < best_len - IMPROVEMENT_EPSILON:
            best, best_len = input_seed, input_len

        elapsed_ms = (time.perf_counter() - started) * 1000
        if deadline.hit:
            logger.warning(
                f"Route optimization cancelled after {elapsed_ms:.1f}ms; "
                f"returning best order so far ({best_len:.0f}m, {n} points)"
            )
        else:
            logger.debug(
                f"Optimized {n} points in {elapsed_ms:.1f}ms: "
                f"{input_len:.0f}m -> {best_len:.0f}m"
            )
        return [points[i] for i in best], deadline.hit


def _pinned_indices(points: list[RoutePoint]) -> tuple[int, int | None]:
    """Start (first role=start, else index 0) and end (first role=end, if distinct)."""
    starts = [i for i, p in enumerate(points) if p.role == "start"]
    if len(starts) > 1:
        logger.warning(f"{len(starts)} points tagged as start; pinning the first")
    start = starts[0] if starts else 0
    end = next((i for i, p in enumerate(points) if p.role == "end" and i != start), None)
    return start, end


def _distance_matrix(points: list[RoutePoint]) -> list[list[float]]:
    n = len(points)
    dist = [[0.0] * n for _ in range(n)]
    for i in range(n):
        a = points[i]
        for j in range(i + 1, n):
            b = points[j]
            d = haversine_meters(a.latitude, a.longitude, b.latitude, b.longitude)
            dist[i][j] = d
            dist[j][i] = d
    return dist


def _nearest_neighbor(start: int, remaining: list[int], dist: list[list[float]]) -> list[int]:
    """Greedy nearest-unvisited order; ties go to the earlier input position."""
    unvisited = list(remaining)
    order = []
    current = start
    while unvisited:
        nearest = min(unvisited, key=lambda j: dist[current][j])
        unvisited.remove(nearest)
        order.append(nearest)
        current = nearest
    return order


def _tour_length(tour: list[int], dist: list[list[float]]) -> float:
    return math.fsum(dist[a][b] for a, b in zip(tour, tour[1:]))


def _two_opt(
    seed: list[int],
    dist: list[list[float]],
    last_movable: int,
    max_moves: int,
    deadline: _Deadline,
) -> list[int]:
    """Reverse sub-paths within [1, last_movable] while that strictly shortens the path."""
    tour = list(seed)
    n = len(tour)
    moves = 0
    improved = True
    while improved:
        improved = False
        for i in range(1, last_movable):
            if deadline.expired():
                return tour
            for j in range(i + 1, last_movable + 1):
                a, b, c = tour[i - 1], tour[i], tour[j]
                before = dist[a][b]
                after = dist[a][c]
                if j + 1 < n:
                    d = tour[j + 1]
                    before += dist[c][d]
                    after += dist[b][d]
                if after < before - IMPROVEMENT_EPSILON:
                    tour[i:j + 1] = tour[i:j + 1][::-1]
                    moves += 1
                    improved = True
                    if moves >= max_moves:
                        logger.debug(f"2-opt move cap {max_moves} reached")
                        return tour
    return tour


route_optimizer = RouteOptimizer()
