#!/usr/bin/env python3
"""
Simulated annealing search for a five-color palette around a primary color.

The search walks a 15-integer vector (five RGB triples) one +/-10 channel step
at a time. While the temperature is above ``TEMPERATURE_FLOOR`` a single random
neighbour is sampled and accepted with the Metropolis rule; once the floor is
reached the search becomes a best-improvement hill climb that stops after
``patience`` consecutive iterations without a move.
"""

import argparse
import logging
import math
import threading
import time
from dataclasses import dataclass, field
from enum import Enum

import numpy as np

from palette_colors import parse_color
from palette_fitness import SOLUTION_LENGTH, evaluate_solution
from palette_report import print_run_summary, visualize_run


logger = logging.getLogger(__name__)

TEMPERATURE_FLOOR = 0.001
INITIAL_TEMPERATURE = 1.0
STEP_SIZE = 10
LOWER_EDGE = 60
UPPER_EDGE = 245


class ConfigurationError(ValueError):
    """Invalid run configuration or anchor color."""


class OracleError(RuntimeError):
    """The fitness function failed while scoring a candidate."""


class RunState(Enum):
    IDLE = 'idle'
    RUNNING = 'running'
    STOPPED = 'stopped'
    CONVERGED = 'converged'
    EXHAUSTED = 'exhausted'

    @property
    def is_terminal(self):
        return self in (RunState.STOPPED, RunState.CONVERGED, RunState.EXHAUSTED)


@dataclass(frozen=True)
class Move:
    index: int
    change: int


@dataclass(frozen=True)
class MetricsRecord:
    iteration: int
    fitness: float
    temperature: float


@dataclass(frozen=True)
class AnnealingConfig:
    """
    Per-run parameters, captured when a run starts.

    Args:
        patience: Iterations without a move tolerated before stopping (>= 0)
        decay_rate: Percentage of the temperature kept each iteration (0-100)
        max_iterations: Hard cap on iterations (> 0)
    """
    patience: int = 50
    decay_rate: float = 90
    max_iterations: int = 1000

    def validate(self):
        if not _is_int(self.patience) or self.patience < 0:
            raise ConfigurationError("The patience must be a non-negative number")
        if (isinstance(self.decay_rate, bool) or not isinstance(self.decay_rate, (int, float, np.number))
                or not 0 <= self.decay_rate <= 100):
            raise ConfigurationError("The decay rate must be a percentage value")
        if not _is_int(self.max_iterations) or self.max_iterations <= 0:
            raise ConfigurationError("The iterations must be a positive number")
        return self


def _is_int(value):
    return isinstance(value, (int, np.integer)) and not isinstance(value, bool)


@dataclass(frozen=True)
class RunHandle:
    run_id: int


@dataclass(frozen=True)
class RunSnapshot:
    """Read-only view of the run, safe to hand to renderers."""
    state: RunState
    iteration: int
    temperature: float
    patience_count: int
    solution: tuple
    anchor: tuple
    metrics: tuple
    accepted_moves: int
    rejected_moves: int


def seed_initial_solution(rng):
    """Uniformly random 15-channel starting palette."""
    return [int(v) for v in rng.integers(0, 256, size=SOLUTION_LENGTH)]


def compute_neighbours(solution):
    """
    List every single-channel step available from ``solution``.

    Channels below 60 may only go up, channels above 245 only down, anything
    in between both ways. Order is channel index ascending, +10 before -10.
    """
    neighbours = []
    for idx, value in enumerate(solution):
        if value < LOWER_EDGE:
            neighbours.append(Move(idx, STEP_SIZE))
        elif value > UPPER_EDGE:
            neighbours.append(Move(idx, -STEP_SIZE))
        else:
            neighbours.append(Move(idx, STEP_SIZE))
            neighbours.append(Move(idx, -STEP_SIZE))
    return neighbours


def apply_move(solution, move):
    """Return a copy of ``solution`` with ``move`` applied."""
    updated = list(solution)
    updated[move.index] += move.change
    return updated


def choose_move(current_fitness, moves, fitnesses, temperature, rng):
    """
    Pick the move to apply this iteration, or None.

    At or below the temperature floor this is a greedy hill climb over all
    neighbours. Above it, one neighbour is drawn at random and accepted if it
    is no worse, or with probability exp(-|delta| / T) otherwise.
    """
    if temperature <= TEMPERATURE_FLOOR:
        best = max(fitnesses)
        if best > current_fitness:
            return moves[fitnesses.index(best)]
        return None

    pick = int(rng.integers(len(moves)))
    candidate = fitnesses[pick]
    if candidate >= current_fitness:
        return moves[pick]

    accept_prob = math.exp(-abs(candidate - current_fitness) / temperature)
    if rng.random() < accept_prob:
        return moves[pick]
    return None


def next_temperature(temperature, decay_rate):
    """Geometric cooling that settles on ``TEMPERATURE_FLOOR``."""
    if temperature <= TEMPERATURE_FLOOR:
        return temperature
    return max(temperature * (decay_rate / 100), TEMPERATURE_FLOOR)


class PatienceTracker:
    """Counts consecutive iterations that ended without a move."""

    def __init__(self, budget):
        self.budget = budget
        self.count = 0

    def no_move(self):
        """Record an idle iteration. Returns True once patience is used up."""
        if self.count >= self.budget:
            return True
        self.count += 1
        return self.count >= self.budget

    def reset(self):
        self.count = 0


def sleep_pacing(seconds=0.05):
    """Pacing strategy that pauses between iterations so progress can be watched."""
    def pace():
        time.sleep(seconds)
    return pace


@dataclass
class _Run:
    handle: RunHandle
    config: AnnealingConfig
    anchor: tuple
    solution: list
    tracker: PatienceTracker
    temperature: float = INITIAL_TEMPERATURE
    iteration: int = 0
    state: RunState = RunState.RUNNING
    accepted_moves: int = 0
    rejected_moves: int = 0
    metrics: list = field(default_factory=list)
    stop_requested: threading.Event = field(default_factory=threading.Event)


class SimulatedAnnealing:
    """
    Palette search driver.

    Owns a single run at a time. ``start`` begins a run, ``step`` advances it
    one iteration, ``run`` steps until a terminal state. ``stop`` may be called
    from another thread and takes effect before the next iteration. A new run
    can only be started once the previous one has finished.

    Args:
        fitness: Callable ``(anchor_rgb, solution) -> float``, higher is better
        rng: numpy Generator used for seeding and acceptance draws
        seed: Seed for a fresh Generator when ``rng`` is not given
        pacing: Optional callable invoked between iterations by ``run``
    """

    def __init__(self, fitness=evaluate_solution, rng=None, seed=None, pacing=None):
        self.fitness = fitness
        self.rng = rng if rng is not None else np.random.default_rng(seed)
        self.pacing = pacing
        self._run = None
        self._runs_started = 0
        self._lock = threading.Lock()
        self._step_lock = threading.Lock()

    # Queries

    @property
    def state(self):
        return self._run.state if self._run else RunState.IDLE

    @property
    def solution(self):
        return tuple(self._run.solution) if self._run else None

    @property
    def metrics(self):
        with self._lock:
            return tuple(self._run.metrics) if self._run else ()

    def snapshot(self):
        """Consistent frozen copy of the current run."""
        with self._lock:
            run = self._run
            if run is None:
                return RunSnapshot(RunState.IDLE, 0, INITIAL_TEMPERATURE, 0, (), (), (), 0, 0)
            return RunSnapshot(
                state=run.state,
                iteration=run.iteration,
                temperature=run.temperature,
                patience_count=run.tracker.count,
                solution=tuple(run.solution),
                anchor=run.anchor,
                metrics=tuple(run.metrics),
                accepted_moves=run.accepted_moves,
                rejected_moves=run.rejected_moves,
            )

    # Control

    def start(self, config, anchor_color):
        """
        Validate the configuration and begin a fresh run.

        Raises:
            ConfigurationError: if the config or anchor color is invalid; the
                previous run (if any) is left untouched.
            RuntimeError: if the current run has not finished yet.
        """
        if not isinstance(config, AnnealingConfig):
            raise ConfigurationError(f"Expected AnnealingConfig, got {type(config).__name__}")
        config.validate()
        try:
            anchor = parse_color(anchor_color)
        except ValueError as e:
            raise ConfigurationError(str(e)) from e

        with self._lock:
            if self._run is not None and self._run.state == RunState.RUNNING:
                raise RuntimeError(f"Run {self._run.handle.run_id} is still running; stop it first")
            self._runs_started += 1
            handle = RunHandle(self._runs_started)
            self._run = _Run(
                handle=handle,
                config=config,
                anchor=anchor,
                solution=seed_initial_solution(self.rng),
                tracker=PatienceTracker(config.patience),
            )
        logger.info("Run %d started: anchor=%s patience=%d decay=%s%% max_iterations=%d",
                    handle.run_id, anchor, config.patience, config.decay_rate, config.max_iterations)
        return handle

    def stop(self, handle=None):
        """Request cancellation of the current run. Idempotent."""
        run = self._run
        if run is None:
            return
        if handle is not None and handle != run.handle:
            logger.debug("Ignoring stop for stale run %d", handle.run_id)
            return
        run.stop_requested.set()

    def _score(self, anchor, solution):
        try:
            value = float(self.fitness(anchor, solution))
        except Exception as e:
            raise OracleError(f"Fitness function failed: {e}") from e
        if not math.isfinite(value):
            raise OracleError(f"Fitness function returned a non-finite value: {value}")
        return value

    def step(self):
        """
        Advance the current run by one iteration.

        Returns:
            The MetricsRecord appended this iteration, or None when the run is
            already finished or was cancelled before the iteration began.
        """
        run = self._run
        if run is None:
            raise RuntimeError("No run has been started")
        return self._step(run)

    def _step(self, run):
        # One iteration at a time, whichever thread asks
        with self._step_lock:
            return self._iterate(run)

    def _iterate(self, run):
        if run.state.is_terminal:
            return None

        if run.stop_requested.is_set():
            self._finish(run, RunState.STOPPED)
            return None

        try:
            current = self._score(run.anchor, run.solution)
            moves = compute_neighbours(run.solution)
            fitnesses = [self._score(run.anchor, apply_move(run.solution, m)) for m in moves]
        except OracleError:
            logger.error("Run %d stopped at iteration %d: fitness evaluation failed",
                         run.handle.run_id, run.iteration, exc_info=True)
            self._finish(run, RunState.STOPPED)
            raise

        move = choose_move(current, moves, fitnesses, run.temperature, self.rng)
        temperature = next_temperature(run.temperature, run.config.decay_rate)
        record = MetricsRecord(run.iteration, current, temperature)

        with self._lock:
            run.temperature = temperature
            run.metrics.append(record)
            if move is None:
                run.rejected_moves += 1
                converged = run.tracker.no_move()
            else:
                run.accepted_moves += 1
                converged = False
                run.tracker.reset()
                run.solution = apply_move(run.solution, move)
            iteration = run.iteration
            run.iteration += 1

        logger.debug("Iteration %d: fitness=%.4f temperature=%.5f move=%s",
                     iteration, current, temperature, move)

        if iteration + 1 >= run.config.max_iterations:
            self._finish(run, RunState.EXHAUSTED)
        elif converged:
            self._finish(run, RunState.CONVERGED)
        return record

    def run(self, on_record=None):
        """
        Step until the run reaches a terminal state.

        Args:
            on_record: Optional callback receiving each MetricsRecord

        Returns:
            Final RunSnapshot
        """
        run = self._run
        if run is None:
            raise RuntimeError("No run has been started")
        while not run.state.is_terminal:
            record = self._step(run)
            if record is not None and on_record is not None:
                on_record(record)
            if self.pacing is not None and not run.state.is_terminal:
                self.pacing()
        return self.snapshot()

    def _finish(self, run, state):
        with self._lock:
            run.state = state
        logger.info("Run %d %s after %d iterations (temperature=%.5f)",
                    run.handle.run_id, state.value, run.iteration, run.temperature)


def generate_palette(anchor_color, config=None, fitness=evaluate_solution, seed=None,
                     pacing=None, verbose=False):
    """
    Run one full search and return the final snapshot.

    Args:
        anchor_color: Hex string or RGB triple the palette is built around
        config: AnnealingConfig, defaults when omitted
        fitness: Fitness function
        seed: Random seed for reproducible runs
        pacing: Optional pause between iterations
        verbose: Print per-iteration progress
    """
    config = config or AnnealingConfig()
    annealer = SimulatedAnnealing(fitness=fitness, seed=seed, pacing=pacing)
    annealer.start(config, anchor_color)

    if verbose:
        print(f"Annealing a palette around {parse_color(anchor_color)} "
              f"(patience={config.patience}, decay={config.decay_rate}%, "
              f"max iterations={config.max_iterations})...\n")

    def report(record):
        print(f"Iteration {record.iteration:4d}: Fitness = {record.fitness:7.4f}, "
              f"Temperature = {record.temperature:.5f}")

    return annealer.run(on_record=report if verbose else None)


def main(argv=None):
    """Command-line entry point."""
    parser = argparse.ArgumentParser(description="Generate a palette around a primary color with simulated annealing")
    parser.add_argument('--anchor', default='#3366CC', help="Primary color as hex (default: %(default)s)")
    parser.add_argument('--patience', type=int, default=50)
    parser.add_argument('--decay-rate', type=float, default=90, help="Temperature kept per iteration, in percent")
    parser.add_argument('--iterations', type=int, default=1000)
    parser.add_argument('--seed', type=int, default=None)
    parser.add_argument('--pace', type=float, default=0.0, help="Seconds to pause between iterations")
    parser.add_argument('--output', default='/tmp/annealed_palette.png', help="Where to save the chart")
    parser.add_argument('--no-plot', action='store_true', help="Skip the matplotlib report")
    parser.add_argument('--verbose', '-v', action='store_true')
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO if args.verbose else logging.WARNING,
                        format='%(asctime)s %(name)s %(levelname)s: %(message)s')

    config = AnnealingConfig(patience=args.patience, decay_rate=args.decay_rate,
                             max_iterations=args.iterations)
    try:
        snapshot = generate_palette(
            args.anchor, config, seed=args.seed,
            pacing=sleep_pacing(args.pace) if args.pace > 0 else None,
            verbose=args.verbose,
        )
    except ConfigurationError as e:
        parser.error(str(e))

    print_run_summary(snapshot)
    if not args.no_plot:
        visualize_run(snapshot, path=args.output)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
