"""
Sample Trajectory Generator
===========================

Writes an .npz input file of deputies flying relative to a chief on a
Keplerian orbit, using the Clohessy-Wiltshire (HCW) solution for the
relative motion. Each deputy gets its own native sampling so the viewer's
resampling is exercised, but all of them share the chief's start and stop.

Usage:
    python -m tools.sample demo.npz
    python -m tools.sample demo.npz --objects 5 --orbits 2
    python -m tools.sample demo.npz --altitude 700 --inclination 51.6

Axes follow the Hill frame: x radial, y along-track, z cross-track.
"""

import argparse
import math
from typing import List, Tuple

import numpy as np

from trajectory.loader import OrbitParameters, write_trajectory_file

EARTH_MU = 398600.4418     # km^3/s^2
EARTH_RADIUS = 6378.137    # km


def solve_kepler(mean_anomaly: np.ndarray, ec: float, iterations: int = 20) -> np.ndarray:
    """Eccentric anomaly from mean anomaly (Newton iteration)."""
    E = mean_anomaly.copy() if ec < 0.8 else np.full_like(mean_anomaly, math.pi)
    for _ in range(iterations):
        E = E - (E - ec * np.sin(E) - mean_anomaly) / (1.0 - ec * np.cos(E))
    return E


def chief_orbit(times: np.ndarray, a: float, ec: float, mu: float) -> Tuple[np.ndarray, np.ndarray]:
    """True anomaly and radius of the chief at the given times (periapsis at t=0)."""
    n = math.sqrt(mu / a ** 3)
    E = solve_kepler(n * times, ec)
    theta = 2.0 * np.arctan2(math.sqrt(1 + ec) * np.sin(E / 2), math.sqrt(1 - ec) * np.cos(E / 2))
    r = a * (1.0 - ec * np.cos(E))
    return np.unwrap(theta), r


def hcw_states(times: np.ndarray, n: float, initial: np.ndarray) -> np.ndarray:
    """
    Closed-form HCW propagation.

    Args:
        times: (N,) seconds
        n: chief mean motion (rad/s)
        initial: (6,) relative state at t=0

    Returns:
        (6, N) relative states
    """
    x0, y0, z0, vx0, vy0, vz0 = initial
    nt = n * times
    s, c = np.sin(nt), np.cos(nt)

    x = (4 - 3 * c) * x0 + s / n * vx0 + 2 / n * (1 - c) * vy0
    y = 6 * (s - nt) * x0 + y0 - 2 / n * (1 - c) * vx0 + (4 * s - 3 * nt) / n * vy0
    z = z0 * c + vz0 / n * s
    vx = 3 * n * s * x0 + c * vx0 + 2 * s * vy0
    vy = 6 * n * (c - 1) * x0 - 2 * s * vx0 + (4 * c - 3) * vy0
    vz = -z0 * n * s + vz0 * c
    return np.vstack([x, y, z, vx, vy, vz])


def deputy_initial_state(idx: int, n: float, size: float, rng: np.random.Generator) -> np.ndarray:
    """Bounded (drift-free) relative orbit: vy0 = -2 n x0."""
    x0 = size * rng.uniform(0.3, 1.0) * (1 if idx % 2 == 0 else -1)
    y0 = size * rng.uniform(-0.5, 0.5)
    z0 = size * rng.uniform(-0.5, 0.5)
    vx0 = n * size * rng.uniform(-0.5, 0.5)
    vz0 = n * size * rng.uniform(-0.5, 0.5)
    return np.array([x0, y0, z0, vx0, -2.0 * n * x0, vz0])


def native_times(stop: float, step: float) -> np.ndarray:
    """0..stop with spacing step; the last sample always lands on stop."""
    times = np.arange(0.0, stop, step)
    return np.append(times, stop)


def generate(
    num_objects: int = 3,
    orbits: float = 1.0,
    altitude: float = 500.0,
    ec: float = 0.0,
    inc: float = 45.0,
    omega: float = 0.0,
    Omega: float = 30.0,
    size: float = 1.0,
    base_step: float = 10.0,
    seed: int = 0,
) -> Tuple[List[np.ndarray], List[np.ndarray], OrbitParameters]:
    """
    Build states, times and the chief orbit.

    Distances in km, times in s, angles given in degrees.
    """
    if num_objects < 1:
        raise ValueError("num_objects must be at least 1")

    mu = EARTH_MU
    a = EARTH_RADIUS + altitude
    n = math.sqrt(mu / a ** 3)
    stop = math.floor(orbits * 2 * math.pi / n)
    rng = np.random.default_rng(seed)

    states = []
    times = []
    for idx in range(num_objects):
        t = native_times(stop, base_step * (1.0 + 0.37 * idx))
        states.append(hcw_states(t, n, deputy_initial_state(idx, n, size, rng)))
        times.append(t)

    theta, r = chief_orbit(times[0], a, ec, mu)
    orbit = OrbitParameters(
        a=a, ec=ec, mu=mu,
        inc=math.radians(inc), omega=math.radians(omega), Omega=math.radians(Omega),
        theta=theta, r=r,
    )
    return states, times, orbit


def main():
    parser = argparse.ArgumentParser(description="Generate an HCW sample trajectory file")
    parser.add_argument("output", help="Output .npz file")
    parser.add_argument("--objects", "-n", type=int, default=3, help="Number of deputies")
    parser.add_argument("--orbits", type=float, default=1.0, help="Chief orbits to cover")
    parser.add_argument("--altitude", type=float, default=500.0, help="Chief altitude (km)")
    parser.add_argument("--eccentricity", type=float, default=0.0, help="Chief eccentricity")
    parser.add_argument("--inclination", type=float, default=45.0, help="Chief inclination (deg)")
    parser.add_argument("--size", type=float, default=1.0, help="Formation size (km)")
    parser.add_argument("--step", type=float, default=10.0, help="Native sampling of object 1 (s)")
    parser.add_argument("--seed", type=int, default=0)
    args = parser.parse_args()

    states, times, orbit = generate(
        num_objects=args.objects, orbits=args.orbits, altitude=args.altitude,
        ec=args.eccentricity, inc=args.inclination, size=args.size,
        base_step=args.step, seed=args.seed,
    )
    path = write_trajectory_file(args.output, states, times, orbit)
    print(f"[Sample] Wrote {path} ({args.objects} objects, t = 0 .. {times[0][-1]:g} s)")


if __name__ == "__main__":
    main()
