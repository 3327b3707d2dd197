#!/usr/bin/env python
"""Load script that floods the running gateway and counts admissions."""

from __future__ import annotations

import argparse
import asyncio
import math
from time import perf_counter

import httpx


def percentile(values: list[float], pct: float) -> float:
    if not values:
        return 0.0
    ordered = sorted(values)
    if len(ordered) == 1:
        return ordered[0]
    position = pct * (len(ordered) - 1)
    lower = math.floor(position)
    upper = math.ceil(position)
    if lower == upper:
        return ordered[int(position)]
    weight = position - lower
    return ordered[lower] * (1 - weight) + ordered[upper] * weight


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Flood the /v1/requests endpoint and tally 200 vs 429.")
    parser.add_argument("--n", type=int, default=100, help="Total requests to send.")
    parser.add_argument("--concurrency", type=int, default=16, help="Concurrent in-flight requests.")
    parser.add_argument("--url", type=str, default="http://127.0.0.1:8000", help="Gateway base URL.")
    parser.add_argument("--timeout", type=float, default=10.0, help="HTTP client timeout in seconds.")
    return parser.parse_args()


async def post_request(
    client: httpx.AsyncClient, url: str, request_id: str, sem: asyncio.Semaphore
) -> tuple[float, int | None]:
    async with sem:
        start = perf_counter()
        try:
            response = await client.post(url, json={"request_id": request_id})
            return (perf_counter() - start) * 1000, response.status_code
        except httpx.HTTPError:
            return (perf_counter() - start) * 1000, None


async def main_async(args: argparse.Namespace) -> None:
    base = args.url.rstrip("/")
    async with httpx.AsyncClient(timeout=args.timeout) as client:
        health = await client.get(f"{base}/health")
        if health.status_code != 200:
            raise RuntimeError("Gateway health check failed.")

        settings = (await client.get(f"{base}/v1/limiter")).json()
        sem = asyncio.Semaphore(max(1, args.concurrency))
        tasks = [post_request(client, f"{base}/v1/requests", f"load-{idx:05d}", sem) for idx in range(args.n)]
        results = await asyncio.gather(*tasks)

    admitted = sum(1 for _, code in results if code == 200)
    rejected = sum(1 for _, code in results if code == 429)
    failed = len(results) - admitted - rejected
    latencies = [lat for lat, code in results if code is not None]

    print(
        f"Gateway load (requests={len(results)}, concurrency={args.concurrency}, "
        f"capacity={settings['capacity']}, refill_rate={settings['refill_rate']}) "
        f"admitted={admitted} rejected={rejected} failed={failed} "
        f"p50={percentile(latencies, 0.5):.2f}ms p95={percentile(latencies, 0.95):.2f}ms"
    )


def main() -> None:
    args = parse_args()
    asyncio.run(main_async(args))


if __name__ == "__main__":
    main()
