"""Fixed-cadence cycle scheduler.

Each 60Hz tick samples input, runs a batch of ``clock_rate // 60``
instructions, publishes the framebuffer, decrements the timers and sleeps
out the rest of the period. The scheduler is the only owner of the machine
state and the only place where fatal faults end a session.
"""

import enum
import time
from typing import Callable, Optional

import jax.numpy as jnp
import numpy as np

from vipchip.constants import MEMORY_SIZE, NUM_KEYS, TIMER_FREQUENCY, Fault
from vipchip.emulator import framebuffer, run_instructions, tick_timers
from vipchip.exceptions import FatalFault
from vipchip.logging import EmulatorLogger, build_tqdm_progress_bar, get_logger
from vipchip.state import EmulatorState

TICK_PERIOD = 1.0 / TIMER_FREQUENCY


class RunState(enum.Enum):
    RUNNING = "running"
    STOPPED = "stopped"
    QUIT = "quit"


class Scheduler:
    """Drive an ``EmulatorState`` at 60 ticks per second.

    Args:
        state: Initial machine state, program already loaded
        clock_rate: Target instructions per second
        poll_input: Called once per tick with the scheduler, before any
            instruction runs. It may call ``set_key`` any number of times
            and ``set_run_state`` at most once.
        present: Receives the 2048 row-major display cells after each tick's
            batch. The array is a fresh copy owned by the receiver.
        clock: Monotonic time source in seconds
        sleep: Sleep function in seconds
        logger: Session logger, defaults to the package logger
    """

    def __init__(
        self,
        state: EmulatorState,
        clock_rate: int,
        poll_input: Optional[Callable[["Scheduler"], None]] = None,
        present: Optional[Callable[[np.ndarray], None]] = None,
        clock: Callable[[], float] = time.perf_counter,
        sleep: Callable[[float], None] = time.sleep,
        logger: Optional[EmulatorLogger] = None,
    ):
        if clock_rate <= 0:
            raise ValueError(f"clock_rate must be positive, got {clock_rate}")
        self.logger = logger or get_logger()
        if clock_rate % TIMER_FREQUENCY:
            self.logger.warning(
                f"clock_rate {clock_rate} is not a multiple of {TIMER_FREQUENCY}, "
                f"running {clock_rate // TIMER_FREQUENCY} instructions per tick"
            )

        self.state = state
        self.clock_rate = clock_rate
        self.poll_input = poll_input
        self.present = present
        self.clock = clock
        self.sleep = sleep

        self.keypad = np.zeros(NUM_KEYS, dtype=np.bool_)
        self.run_state = RunState.RUNNING
        self.ticks = 0
        self.instructions = 0

    @property
    def instructions_per_tick(self) -> int:
        return self.clock_rate // TIMER_FREQUENCY

    def set_key(self, index: int, pressed: bool):
        """Record the key-down state of keypad key ``index`` (0x0-0xF)."""
        if not 0 <= index < NUM_KEYS:
            raise ValueError(f"Key index must be in [0, {NUM_KEYS}), got {index}")
        self.keypad[index] = bool(pressed)

    def set_run_state(self, run_state: RunState):
        """Pause, resume or quit. QUIT is terminal."""
        if self.run_state is RunState.QUIT:
            return
        self.logger.log_run_state(self.run_state, run_state)
        self.run_state = RunState(run_state)

    def toggle_pause(self):
        """Flip between RUNNING and STOPPED."""
        if self.run_state is RunState.RUNNING:
            self.set_run_state(RunState.STOPPED)
        elif self.run_state is RunState.STOPPED:
            self.set_run_state(RunState.RUNNING)

    def tick(self) -> bool:
        """Run one 60Hz iteration without pacing.

        Returns:
            False once the session has quit, True otherwise

        Raises:
            FatalFault: The batch left the machine in a fatal condition. The
                run state is QUIT and nothing from the batch is published.
        """
        if self.run_state is RunState.QUIT:
            return False

        if self.poll_input is not None:
            self.poll_input(self)
        if self.run_state is RunState.QUIT:
            return False

        if self.run_state is RunState.RUNNING:
            state = self.state.replace(keypad=jnp.asarray(self.keypad))
            state = run_instructions(state, self.instructions_per_tick)
            self._check_fault(state)
            self.state = state
            self.instructions += self.instructions_per_tick

        if self.present is not None:
            self.present(framebuffer(self.state))

        if self.run_state is RunState.RUNNING:
            self.state = tick_timers(self.state)

        self.ticks += 1
        return True

    def _check_fault(self, state: EmulatorState):
        fault = Fault(int(state.fault))
        pc = int(state.fault_pc)
        if fault is Fault.NONE:
            # a jump out of memory on the last slot of the batch
            if int(state.pc) < MEMORY_SIZE:
                return
            fault, pc = Fault.PC_OUT_OF_BOUNDS, int(state.pc)
        self.run_state = RunState.QUIT
        self.logger.log_fault(fault, pc)
        raise FatalFault(fault, pc)

    def run(self, max_ticks: Optional[int] = None):
        """Tick at 60Hz until the session quits or ``max_ticks`` elapse."""
        while max_ticks is None or self.ticks < max_ticks:
            start = self.clock()
            if not self.tick():
                break
            elapsed = self.clock() - start
            self.sleep(max(0.0, TICK_PERIOD - elapsed))

    def run_headless(self, ticks: int, progress: bool = True) -> EmulatorState:
        """Run ``ticks`` iterations back to back with a progress bar."""
        bar = build_tqdm_progress_bar(ticks, disable=not progress)
        try:
            for _ in range(ticks):
                if not self.tick():
                    break
                bar.update(1)
        finally:
            bar.close()
        return self.state
