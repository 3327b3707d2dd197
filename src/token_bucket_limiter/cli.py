"""Typer CLI for exercising the token bucket locally."""

from __future__ import annotations

import time

import typer

from .clock import ManualClock
from .rate_limiter import InvalidConfigurationError, TokenBucket

app = typer.Typer(help="Drive a token bucket from the command line.")


@app.command()
def demo(
    capacity: float = typer.Option(3, help="Burst capacity of the bucket."),
    rate: float = typer.Option(1.0, help="Tokens refilled per second."),
    calls: int = typer.Option(5, "--calls", min=1, help="Size of the initial burst."),
    wait: float = typer.Option(1.1, "--wait", min=0.0, help="Seconds to sleep before the final call."),
) -> None:
    """Fire a burst of calls, sleep, then try once more on the real clock."""

    bucket = _build_bucket(capacity, rate)
    for idx in range(1, calls + 1):
        typer.echo(f"call {idx} -> {bucket.try_acquire()}")

    time.sleep(wait)
    typer.echo(f"after {wait:g}s -> {bucket.try_acquire()}")


@app.command()
def simulate(
    capacity: float = typer.Option(3, help="Burst capacity of the bucket."),
    rate: float = typer.Option(1.0, help="Tokens refilled per second."),
    calls: int = typer.Option(10, "--calls", min=1, help="Number of calls to simulate."),
    interval: float = typer.Option(0.25, "--interval", min=0.0, help="Simulated seconds between calls."),
) -> None:
    """Replay evenly spaced calls against a simulated clock."""

    clock = ManualClock()
    bucket = _build_bucket(capacity, rate, clock=clock)
    admitted = 0
    for idx in range(1, calls + 1):
        if idx > 1:
            clock.advance(interval)
        decision = bucket.try_acquire()
        admitted += decision
        typer.echo(f"t={clock.now:.3f}s call {idx} -> {decision}")

    typer.echo(f"admitted={admitted} rejected={calls - admitted}")


def _build_bucket(capacity: float, rate: float, clock: ManualClock | None = None) -> TokenBucket:
    try:
        return TokenBucket(capacity, rate, clock=clock, thread_safe=False)
    except InvalidConfigurationError as exc:
        typer.echo(f"Invalid limiter configuration: {exc}", err=True)
        raise typer.Exit(code=2) from exc


if __name__ == "__main__":
    app()
