"""
Frame Transform - Hill (radial / along-track / cross-track) to inertial.

The reference orbit is described by its classical elements and by the true
anomaly theta and radius r sampled along it. For every sample:

    rp   = r [cos(theta), sin(theta), 0]                    perifocal position
    drp  = mu/h [-sin(theta), e + cos(theta), 0]             perifocal velocity
    rin  = M rp,  drin = M drp                               inertial reference
    ON   = rows [rin/|rin|, (h x rin)/|h x rin|, h/|h|]      h = rin x drin
    pos  = rin + ON^T rho

where M rotates perifocal into inertial axes via (Omega, omega, inc).
"""

import math
from enum import Enum
from typing import List

import numpy as np
from numba import njit

from .loader import OrbitParameters, TrajectorySet


class VelocityModel(Enum):
    """How an object's inertial velocity is formed."""
    REFERENCE = "reference"  # velocity of the reference orbit point
    FULL = "full"            # plus the rotated relative velocity (transport theorem)


def perifocal_to_inertial_matrix(Omega: float, omega: float, inc: float) -> np.ndarray:
    """Rotation from the perifocal frame to the inertial frame (3x3)."""
    cO, sO = math.cos(Omega), math.sin(Omega)
    cw, sw = math.cos(omega), math.sin(omega)
    ci, si = math.cos(inc), math.sin(inc)
    return np.array([
        [cO * cw - sO * ci * sw, -cO * sw - sO * ci * cw, sO * si],
        [sO * cw + cO * ci * sw, -sO * sw + cO * ci * cw, -cO * si],
        [si * sw, si * cw, ci],
    ])


@njit(cache=True)
def _hill_to_inertial_kernel(
    M: np.ndarray,        # (3, 3)
    theta: np.ndarray,    # (N,)
    r: np.ndarray,        # (N,)
    ec: float,
    mu_over_h: float,
    hill: np.ndarray,     # (6, N)
    full_velocity: bool,
    out: np.ndarray,      # (6, N) output
):
    """Transform every sample of one object in place into out."""
    n = theta.shape[0]
    for j in range(n):
        ct = math.cos(theta[j])
        st = math.sin(theta[j])

        # Perifocal position / velocity (third component is zero)
        rp0 = r[j] * ct
        rp1 = r[j] * st
        vp0 = -mu_over_h * st
        vp1 = mu_over_h * (ec + ct)

        rx = M[0, 0] * rp0 + M[0, 1] * rp1
        ry = M[1, 0] * rp0 + M[1, 1] * rp1
        rz = M[2, 0] * rp0 + M[2, 1] * rp1
        vx = M[0, 0] * vp0 + M[0, 1] * vp1
        vy = M[1, 0] * vp0 + M[1, 1] * vp1
        vz = M[2, 0] * vp0 + M[2, 1] * vp1

        # Angular momentum h = rin x drin
        hx = ry * vz - rz * vy
        hy = rz * vx - rx * vz
        hz = rx * vy - ry * vx

        r_norm = math.sqrt(rx * rx + ry * ry + rz * rz)
        h_norm = math.sqrt(hx * hx + hy * hy + hz * hz)

        # Radial, cross-track (orbit normal), along-track unit vectors
        ux, uy, uz = rx / r_norm, ry / r_norm, rz / r_norm
        nx, ny, nz = hx / h_norm, hy / h_norm, hz / h_norm
        tx = ny * uz - nz * uy
        ty = nz * ux - nx * uz
        tz = nx * uy - ny * ux

        px = hill[0, j]
        py = hill[1, j]
        pz = hill[2, j]

        out[0, j] = rx + ux * px + tx * py + nx * pz
        out[1, j] = ry + uy * px + ty * py + ny * pz
        out[2, j] = rz + uz * px + tz * py + nz * pz

        if full_velocity:
            # omega x rho with omega = |h| / |r|^2 about the orbit normal
            w = h_norm / (r_norm * r_norm)
            dx = hill[3, j] - w * py
            dy = hill[4, j] + w * px
            dz = hill[5, j]
            out[3, j] = vx + ux * dx + tx * dy + nx * dz
            out[4, j] = vy + uy * dx + ty * dy + ny * dz
            out[5, j] = vz + uz * dx + tz * dy + nz * dz
        else:
            out[3, j] = vx
            out[4, j] = vy
            out[5, j] = vz


def hill_to_inertial(
    hill_states: np.ndarray,
    theta: np.ndarray,
    r: np.ndarray,
    orbit: OrbitParameters,
    velocity_model: VelocityModel = VelocityModel.REFERENCE,
) -> np.ndarray:
    """
    Express one object's Hill-frame states in the inertial frame.

    Args:
        hill_states: (6, N) relative states
        theta, r: reference true anomaly and radius at the same N samples
        orbit: reference orbit elements
        velocity_model: REFERENCE or FULL

    Returns:
        (6, N) inertial states
    """
    M = perifocal_to_inertial_matrix(orbit.Omega, orbit.omega, orbit.inc)
    mu_over_h = orbit.mu / math.sqrt(orbit.mu * orbit.a * (1.0 - orbit.ec ** 2))
    out = np.empty_like(hill_states, dtype=float)
    _hill_to_inertial_kernel(
        np.ascontiguousarray(M),
        np.ascontiguousarray(theta, dtype=float),
        np.ascontiguousarray(r, dtype=float),
        float(orbit.ec),
        mu_over_h,
        np.ascontiguousarray(hill_states, dtype=float),
        velocity_model is VelocityModel.FULL,
        out,
    )
    return out


def transform_trajectories(
    trajectories: TrajectorySet,
    orbit: OrbitParameters,
    velocity_model: VelocityModel = VelocityModel.REFERENCE,
) -> List[np.ndarray]:
    """Inertial (6, N) blocks for every object, on each object's native samples."""
    reference_times = trajectories[0].times
    blocks = []
    for track in trajectories:
        theta, r = orbit.sample(reference_times, track.times)
        blocks.append(hill_to_inertial(track.states, theta, r, orbit, velocity_model))
    return blocks


def reference_orbit(orbit: OrbitParameters) -> np.ndarray:
    """Inertial path of the reference orbit itself, (3, N)."""
    M = perifocal_to_inertial_matrix(orbit.Omega, orbit.omega, orbit.inc)
    perifocal = np.vstack([
        orbit.r * np.cos(orbit.theta),
        orbit.r * np.sin(orbit.theta),
        np.zeros_like(orbit.r),
    ])
    return M @ perifocal
