import signal
import time
from collections.abc import Callable, Iterator
from enum import Enum

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel

from .errors import SyncError
from .load_balancer import LoadBalancer
from .models import SyncPair, SyncPlan
from .reconciler import Reconciler
from .resolvers import resolve_actual_targets, resolve_desired_targets
from .runtime import ContainerRuntime


class ErrorPolicy(str, Enum):
    FAIL_FAST = "fail-fast"  # propagate, the supervisor restarts the process
    CONTINUE = "continue"  # log, drop the rest of the tick, retry next tick


def ticks(
    interval: float,
    should_continue: Callable[[], bool],
    step: float = 0.1,
    clock: Callable[[], float] = time.monotonic,
    sleep: Callable[[float], None] = time.sleep,
) -> Iterator[int]:
    """
    Yields tick numbers: the first immediately, then one per interval.

    The consumer runs each tick to completion before asking for the next one.
    A tick that overruns the interval makes the next one fire at once; missed
    ticks are coalesced, never replayed. Waiting happens in `step` sized
    sleeps so a stop request is noticed promptly.
    """
    count = 0
    deadline = clock()
    while should_continue():
        now = clock()
        if now < deadline:
            sleep(min(step, deadline - now))
            continue

        yield count
        count += 1
        deadline = max(deadline + interval, clock())


class SyncDaemon:
    def __init__(
        self,
        pairs: list[SyncPair],
        host_id: str,
        runtime: ContainerRuntime,
        load_balancer: LoadBalancer,
        reconciler: Reconciler | None = None,
        interval: float = 5,
        control_interval: float = 0.1,
        policy: ErrorPolicy = ErrorPolicy.FAIL_FAST,
        output: Console | None = None,
    ):
        self.pairs = list(pairs)
        self.host_id = host_id
        self.runtime = runtime
        self.load_balancer = load_balancer
        self.console = output or Console()
        self.reconciler = reconciler or Reconciler(load_balancer, output=self.console)
        self.interval = interval
        self.control_interval = control_interval
        self.policy = policy
        self.running = False

    def sync_pair(self, pair: SyncPair) -> SyncPlan:
        handle = self.load_balancer.resolve_target_group(pair.target_group_name)
        actual = resolve_actual_targets(self.load_balancer, self.host_id, handle)
        desired = resolve_desired_targets(self.runtime, self.host_id, pair.name_prefix)
        return self.reconciler.reconcile(pair.target_group_name, handle, desired, actual)

    def run_once(self) -> list[SyncPlan]:
        """One pass over every pair; the first failure aborts the remaining pairs."""
        return [self.sync_pair(pair) for pair in self.pairs]

    def run_tick(self) -> list[SyncPlan] | None:
        try:
            return self.run_once()
        except SyncError as e:
            if self.policy is ErrorPolicy.FAIL_FAST:
                raise
            self.console.print(f"[bold red]Sync tick failed, retrying next tick:[/bold red] {escape(str(e))}")
            return None

    def start(self) -> None:
        """Installs signal handlers, then syncs immediately and every interval until stopped."""
        self.running = True
        signal.signal(signal.SIGINT, self.shutdown)
        signal.signal(signal.SIGTERM, self.shutdown)

        pair_lines = "\n".join(f"[blue]{escape(str(pair))}[/blue]" for pair in self.pairs)
        self.console.print(
            Panel.fit(
                "[bold green]ELB Docker Sync[/bold green]\n"
                f"Instance: [white]{escape(self.host_id)}[/white]\n"
                f"Interval: [white]{self.interval}s[/white]\n"
                f"{pair_lines}",
                title="System Start",
            )
        )

        self.run_control_loop()

    def run_control_loop(self) -> None:
        for _ in ticks(self.interval, lambda: self.running, step=self.control_interval):
            self.run_tick()

        self.console.print("[bold red]System Offline.[/bold red]")

    def shutdown(self, signum, frame):
        """Stops the loop once the current tick has finished."""
        if not self.running:
            return

        self.console.print(f"\n[bold orange1]Signal {signum} received. Shutting down...[/bold orange1]")
        self.running = False
