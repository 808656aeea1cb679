"""Hill to inertial frame transformation."""

import math

import numpy as np
import pytest

from trajectory.loader import OrbitParameters, load_trajectories
from trajectory.transform import (
    VelocityModel, hill_to_inertial, perifocal_to_inertial_matrix,
    reference_orbit, transform_trajectories,
)


def rot_z(angle):
    c, s = math.cos(angle), math.sin(angle)
    return np.array([[c, -s, 0.0], [s, c, 0.0], [0.0, 0.0, 1.0]])


def rot_x(angle):
    c, s = math.cos(angle), math.sin(angle)
    return np.array([[1.0, 0.0, 0.0], [0.0, c, -s], [0.0, s, c]])


class TestRotationMatrix:
    """Perifocal to inertial direction cosines."""

    def test_equatorial_is_z_rotation(self):
        M = perifocal_to_inertial_matrix(0.4, 0.3, 0.0)
        np.testing.assert_allclose(M, rot_z(0.7), atol=1e-12)

    def test_matches_composition(self):
        Omega, omega, inc = 1.1, -0.4, 0.9
        M = perifocal_to_inertial_matrix(Omega, omega, inc)
        np.testing.assert_allclose(M, rot_z(Omega) @ rot_x(inc) @ rot_z(omega), atol=1e-12)

    def test_orthonormal(self):
        M = perifocal_to_inertial_matrix(2.0, 1.0, 0.5)
        np.testing.assert_allclose(M @ M.T, np.eye(3), atol=1e-12)


class TestHillToInertial:
    """Per-sample transformation."""

    def test_circular_speed(self, circular_orbit):
        n = circular_orbit.theta.shape[0]
        hill = np.zeros((6, n))
        hill[0:3] = 0.5

        out = hill_to_inertial(hill, circular_orbit.theta, circular_orbit.r, circular_orbit)

        speed = np.linalg.norm(out[3:6], axis=0)
        np.testing.assert_allclose(speed, math.sqrt(circular_orbit.mu / circular_orbit.a))

    def test_origin_maps_to_reference_orbit(self, circular_orbit):
        n = circular_orbit.theta.shape[0]
        out = hill_to_inertial(np.zeros((6, n)), circular_orbit.theta, circular_orbit.r, circular_orbit)

        np.testing.assert_allclose(out[0:3], reference_orbit(circular_orbit), rtol=1e-12)
        np.testing.assert_allclose(np.linalg.norm(out[0:3], axis=0), circular_orbit.a)

    def test_radial_offset(self, circular_orbit):
        n = circular_orbit.theta.shape[0]
        hill = np.zeros((6, n))
        hill[0] = 2.0  # radial

        out = hill_to_inertial(hill, circular_orbit.theta, circular_orbit.r, circular_orbit)

        np.testing.assert_allclose(np.linalg.norm(out[0:3], axis=0), circular_orbit.a + 2.0)

    def test_cross_track_offset_is_along_orbit_normal(self, circular_orbit):
        n = circular_orbit.theta.shape[0]
        hill = np.zeros((6, n))
        hill[2] = 3.0  # cross-track

        out = hill_to_inertial(hill, circular_orbit.theta, circular_orbit.r, circular_orbit)

        # Equatorial prograde orbit: normal is +z
        np.testing.assert_allclose(out[2], 3.0, atol=1e-9)

    def test_full_model_adds_relative_velocity(self, circular_orbit):
        n = circular_orbit.theta.shape[0]
        hill = np.zeros((6, n))
        hill[4] = 0.01  # along-track relative velocity, zero offset

        reference = hill_to_inertial(hill, circular_orbit.theta, circular_orbit.r, circular_orbit,
                                     VelocityModel.REFERENCE)
        full = hill_to_inertial(hill, circular_orbit.theta, circular_orbit.r, circular_orbit,
                                VelocityModel.FULL)

        np.testing.assert_allclose(
            np.linalg.norm(full[3:6], axis=0),
            math.sqrt(circular_orbit.mu / circular_orbit.a) + 0.01,
        )
        np.testing.assert_allclose(full[0:3], reference[0:3])

    def test_full_model_rotation_term(self, circular_orbit):
        n = circular_orbit.theta.shape[0]
        hill = np.zeros((6, n))
        hill[0] = 1.0  # co-moving point 1 km above the reference

        full = hill_to_inertial(hill, circular_orbit.theta, circular_orbit.r, circular_orbit,
                                VelocityModel.FULL)

        # Rigidly rotating with the frame: speed scales with radius
        mean_motion = math.sqrt(circular_orbit.mu / circular_orbit.a ** 3)
        np.testing.assert_allclose(
            np.linalg.norm(full[3:6], axis=0), mean_motion * (circular_orbit.a + 1.0)
        )


class TestTransformTrajectories:
    """All objects, each on its own native samples."""

    def test_each_object_uses_its_own_times(self, two_objects, circular_orbit):
        states, times = two_objects
        loaded = load_trajectories(states, times, "earth-centered", circular_orbit)

        blocks = transform_trajectories(loaded.trajectories, loaded.orbit)

        assert [b.shape for b in blocks] == [(6, 5), (6, 5)]
        speed = np.linalg.norm(blocks[1][3:6], axis=0)
        np.testing.assert_allclose(speed, math.sqrt(circular_orbit.mu / circular_orbit.a))

    def test_reference_orbit_inclined(self):
        theta = np.linspace(0.0, 2 * math.pi, 9)
        orbit = OrbitParameters(a=1.0, ec=0.0, mu=1.0, inc=math.pi / 2, omega=0.0, Omega=0.0,
                                theta=theta, r=np.ones_like(theta))

        path = reference_orbit(orbit)

        # Polar orbit through the x-z plane
        np.testing.assert_allclose(path[1], 0.0, atol=1e-12)
        assert path[2].max() == pytest.approx(1.0)
