"""Trajectory loading, validation order and file readers."""

import numpy as np
import pytest

from conftest import linear_states
from core.errors import (
    AnimatedError, InvalidData, InvalidOption, InvalidTime, MalformedState,
    MissingOrbitParameters, TimeMismatch,
)
from trajectory.loader import (
    CenterType, ORBIT_KEYS, OrbitParameters, load_trajectories,
    read_trajectory_file, write_trajectory_file,
)


class TestLoadTrajectories:
    """Validation of raw per-object arrays."""

    def test_valid_hill_only(self, two_objects):
        states, times = two_objects
        loaded = load_trajectories(states, times)

        assert loaded.trajectories.num_objects == 2
        assert loaded.center is None
        assert loaded.orbit is None
        assert not loaded.is_inertial
        assert loaded.trajectories[1].num_samples == 5
        assert loaded.trajectories.start_time == 0.0
        assert loaded.trajectories.stop_time == 10.0

    def test_tracks_are_read_only_copies(self, two_objects):
        states, times = two_objects
        loaded = load_trajectories(states, times)

        with pytest.raises(ValueError):
            loaded.trajectories[0].states[0, 0] = 99.0
        states[0][0, 0] = 42.0
        assert loaded.trajectories[0].states[0, 0] == 0.0

    def test_no_objects(self):
        with pytest.raises(InvalidData):
            load_trajectories([], [])

    @pytest.mark.parametrize("rows, word", [(5, "too little"), (7, "too much")])
    def test_wrong_row_count(self, rows, word):
        t = np.array([0.0, 1.0, 2.0])
        with pytest.raises(MalformedState, match=word):
            load_trajectories([np.zeros((rows, 3))], [t])

    def test_time_length_must_match_samples(self):
        with pytest.raises(MalformedState):
            load_trajectories([np.zeros((6, 3))], [np.array([0.0, 1.0])])

    def test_unknown_mode(self, two_objects):
        states, times = two_objects
        with pytest.raises(InvalidOption):
            load_trajectories(states, times, mode="moon-centered")

    def test_non_string_mode(self, two_objects):
        states, times = two_objects
        with pytest.raises(InvalidOption):
            load_trajectories(states, times, mode=3)

    def test_stop_time_mismatch(self):
        a = np.array([0.0, 5.0, 10.0])
        b = np.array([0.0, 5.0, 11.0])
        with pytest.raises(TimeMismatch):
            load_trajectories([linear_states(a), linear_states(b)], [a, b])

    def test_start_time_mismatch(self):
        a = np.array([0.0, 5.0, 10.0])
        b = np.array([1.0, 5.0, 10.0])
        with pytest.raises(TimeMismatch):
            load_trajectories([linear_states(a), linear_states(b)], [a, b])

    def test_repeated_timestamp(self):
        t = np.array([0.0, 1.0, 1.0, 2.0])
        with pytest.raises(InvalidTime):
            load_trajectories([linear_states(t)], [t])

    def test_negative_time(self):
        t = np.array([-1.0, 0.0, 1.0])
        with pytest.raises(InvalidTime):
            load_trajectories([linear_states(t)], [t])

    def test_malformed_state_reported_before_bad_mode(self):
        t = np.array([0.0, 1.0])
        with pytest.raises(MalformedState):
            load_trajectories([np.zeros((5, 2))], [t], mode="bogus")

    def test_bad_mode_reported_before_time_errors(self):
        t = np.array([0.0, 1.0, 1.0])
        with pytest.raises(InvalidOption):
            load_trajectories([linear_states(t)], [t], mode="bogus")

    def test_all_errors_share_base(self):
        with pytest.raises(AnimatedError):
            load_trajectories([], [])


class TestInertialMode:
    """Orbit parameters required for earth/sun centered views."""

    def test_requires_orbit(self, two_objects):
        states, times = two_objects
        with pytest.raises(MissingOrbitParameters):
            load_trajectories(states, times, mode="earth-centered")

    def test_missing_keys_are_named(self, two_objects, circular_orbit):
        states, times = two_objects
        values = {key: getattr(circular_orbit, key) for key in ORBIT_KEYS if key != "mu"}
        with pytest.raises(MissingOrbitParameters, match="mu"):
            load_trajectories(states, times, mode="earth-centered", orbit=values)

    def test_accepts_mapping(self, two_objects, circular_orbit):
        states, times = two_objects
        values = {key: getattr(circular_orbit, key) for key in ORBIT_KEYS}
        loaded = load_trajectories(states, times, mode="sun-centered", orbit=values)

        assert loaded.center is CenterType.SUN
        assert loaded.orbit.a == circular_orbit.a
        np.testing.assert_allclose(loaded.orbit.theta, circular_orbit.theta)

    def test_theta_length_must_match_first_object(self, two_objects, circular_orbit):
        states, times = two_objects
        values = {key: getattr(circular_orbit, key) for key in ORBIT_KEYS}
        values["theta"] = values["theta"][:-1]
        values["r"] = values["r"][:-1]
        with pytest.raises(MalformedState):
            load_trajectories(states, times, mode="earth-centered", orbit=values)

    def test_non_positive_semi_latus_rectum(self):
        with pytest.raises(InvalidData):
            OrbitParameters(a=7000.0, ec=1.0, mu=1.0, inc=0.0, omega=0.0, Omega=0.0,
                            theta=np.zeros(2), r=np.ones(2))

    def test_sample_on_other_times_interpolates(self, circular_orbit, two_objects):
        _, times = two_objects
        theta, r = circular_orbit.sample(times[0], times[1])

        np.testing.assert_allclose(theta, np.interp(times[1], times[0], circular_orbit.theta))
        np.testing.assert_allclose(r, circular_orbit.a)


class TestCenterType:
    """Closed set of frame-centering keywords."""

    def test_keywords(self):
        assert CenterType.from_option("earth-centered") is CenterType.EARTH
        assert CenterType.from_option("sun-centered") is CenterType.SUN
        assert CenterType.from_option(None) is None

    def test_carries_texture(self):
        assert CenterType.EARTH.texture.endswith("earth.jpg")
        assert CenterType.SUN.texture.endswith("sun.jpg")


class TestFileReaders:
    """.npz and .mat inputs."""

    def test_npz_round_trip(self, tmp_path, two_objects, circular_orbit):
        states, times = two_objects
        path = write_trajectory_file(tmp_path / "traject.npz", states, times, circular_orbit)

        loaded = read_trajectory_file(path, "earth-centered")

        assert loaded.trajectories.num_objects == 2
        np.testing.assert_allclose(loaded.trajectories[1].states, states[1])
        assert loaded.orbit.Omega == pytest.approx(circular_orbit.Omega)

    def test_npz_without_orbit_is_hill_only(self, tmp_path, two_objects):
        states, times = two_objects
        path = write_trajectory_file(tmp_path / "traject.npz", states, times)

        assert read_trajectory_file(path).orbit is None
        with pytest.raises(MissingOrbitParameters):
            read_trajectory_file(path, "earth-centered")

    def test_npz_with_no_objects(self, tmp_path):
        path = tmp_path / "empty.npz"
        np.savez(path, a=np.array(1.0))
        with pytest.raises(InvalidData):
            read_trajectory_file(path)

    def test_mat_file(self, tmp_path, two_objects, circular_orbit):
        from scipy.io import savemat

        states, times = two_objects
        sc = np.zeros((1, 2), dtype=[("state", object), ("t", object), ("r", object)])
        for idx in range(2):
            sc[0, idx]["state"] = states[idx]
            sc[0, idx]["t"] = times[idx].reshape(1, -1)
            sc[0, idx]["r"] = circular_orbit.r.reshape(1, -1) if idx == 0 else np.zeros((0, 0))
        path = tmp_path / "traject.mat"
        savemat(str(path), {
            "traject": {"sc": sc},
            "a": circular_orbit.a, "ec": circular_orbit.ec, "mu": circular_orbit.mu,
            "inc": circular_orbit.inc, "omega": circular_orbit.omega, "Omega": circular_orbit.Omega,
            "theta": circular_orbit.theta.reshape(1, -1),
        })

        loaded = read_trajectory_file(path, "earth-centered")

        assert loaded.trajectories.num_objects == 2
        np.testing.assert_allclose(loaded.trajectories[0].states, states[0])
        np.testing.assert_allclose(loaded.trajectories[1].times, times[1])
        np.testing.assert_allclose(loaded.orbit.r, circular_orbit.r)
        assert loaded.orbit.omega == pytest.approx(0.3)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            read_trajectory_file(tmp_path / "nope.npz")

    def test_unknown_suffix(self, tmp_path):
        path = tmp_path / "traject.csv"
        path.write_text("1,2,3")
        with pytest.raises(InvalidData):
            read_trajectory_file(path)
