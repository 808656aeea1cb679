"""
Trajectory Loader
=================

Turns raw per-object state blocks into a validated, immutable trajectory set.

Every object supplies a 6xN state block (rows: x, y, z, vx, vy, vz) and an
N-length time vector. Objects may be sampled differently, but all of them
must start and stop at exactly the same time. Nothing is partially loaded:
the first failed check raises and the whole load is abandoned.

Input files:
    traject.mat   - MATLAB layout: traject.sc(1,n).state / .t, traject.sc(1,1).r
                    and scalars a, ec, mu, inc, omega, Omega plus array theta
    traject.npz   - state_<i> / t_<i> for every object, same orbit keys
"""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Mapping, Optional, Sequence, Tuple, Union

import numpy as np

from config import animated as config
from core.errors import (
    InvalidData, InvalidOption, InvalidTime, MalformedState,
    MissingOrbitParameters, TimeMismatch,
)

NUM_STATE_COMPONENTS = 6

ORBIT_SCALARS = ("a", "ec", "mu", "inc", "omega", "Omega")
ORBIT_ARRAYS = ("theta", "r")
ORBIT_KEYS = ORBIT_SCALARS + ORBIT_ARRAYS


# =============================================================================
# DATA STRUCTURES
# =============================================================================

class CenterType(Enum):
    """Body at the origin of the inertial frame."""
    EARTH = "earth-centered"
    SUN = "sun-centered"

    @property
    def keyword(self) -> str:
        return self.value

    @property
    def texture(self) -> str:
        return config.CENTER_BODIES[self.value]["texture"]

    @property
    def color(self) -> tuple:
        return config.CENTER_BODIES[self.value]["color"]

    @classmethod
    def from_option(cls, option) -> Optional["CenterType"]:
        """Parse the mode selector. None means Hill frame only."""
        if option is None:
            return None
        if isinstance(option, cls):
            return option
        if not isinstance(option, str):
            raise InvalidOption(f"invalid input: {option!r}")
        for member in cls:
            if member.value == option:
                return member
        raise InvalidOption(f"invalid option: '{option}'")


@dataclass(frozen=True)
class ObjectTrack:
    """Native samples of one object."""
    states: np.ndarray  # (6, N)
    times: np.ndarray   # (N,)

    @property
    def num_samples(self) -> int:
        return self.times.shape[0]

    @property
    def positions(self) -> np.ndarray:
        return self.states[0:3]

    @property
    def velocities(self) -> np.ndarray:
        return self.states[3:6]

    @property
    def start_time(self) -> float:
        return float(self.times[0])

    @property
    def stop_time(self) -> float:
        return float(self.times[-1])


@dataclass(frozen=True)
class TrajectorySet:
    """Ordered, immutable collection of object tracks (N >= 1)."""
    tracks: Tuple[ObjectTrack, ...]

    def __len__(self) -> int:
        return len(self.tracks)

    def __iter__(self):
        return iter(self.tracks)

    def __getitem__(self, idx: int) -> ObjectTrack:
        return self.tracks[idx]

    @property
    def num_objects(self) -> int:
        return len(self.tracks)

    @property
    def start_time(self) -> float:
        return self.tracks[0].start_time

    @property
    def stop_time(self) -> float:
        return self.tracks[0].stop_time


@dataclass(frozen=True)
class OrbitParameters:
    """
    Reference orbit used to express Hill-frame data in an inertial frame.

    Angles are in radians. theta and r are sampled on the first object's
    native time vector.
    """
    a: float
    ec: float
    mu: float
    inc: float
    omega: float
    Omega: float
    theta: np.ndarray
    r: np.ndarray

    def __post_init__(self):
        if self.theta.shape != self.r.shape:
            raise MalformedState(
                f"theta has {self.theta.shape[0]} samples but r has {self.r.shape[0]}"
            )
        if self.mu <= 0:
            raise InvalidData("mu must be positive")
        if self.a * (1.0 - self.ec ** 2) <= 0:
            raise InvalidData("orbit has a non-positive semi-latus rectum (check a and ec)")

    @classmethod
    def from_mapping(cls, values: Mapping) -> "OrbitParameters":
        """Build from a dict-like of loaded variables, naming any that are missing."""
        missing = [key for key in ORBIT_KEYS if key not in values or values[key] is None]
        if missing:
            raise MissingOrbitParameters(
                f"inertial frame requires orbit variables: {', '.join(missing)}"
            )
        scalars = {key: float(np.asarray(values[key], dtype=float).reshape(-1)[0])
                   for key in ORBIT_SCALARS}
        arrays = {key: np.asarray(values[key], dtype=float).reshape(-1)
                  for key in ORBIT_ARRAYS}
        return cls(**scalars, **arrays)

    def sample(self, reference_times: np.ndarray, times: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
        """
        theta and r at the given timestamps.

        Exact when times is the reference vector; otherwise linearly
        interpolated (theta is unwrapped first so it never jumps by 2*pi).
        """
        if times.shape == reference_times.shape and np.array_equal(times, reference_times):
            return self.theta, self.r
        theta = np.interp(times, reference_times, np.unwrap(self.theta))
        r = np.interp(times, reference_times, self.r)
        return theta, r


@dataclass(frozen=True)
class LoadedTrajectories:
    """Result of a load: the trajectory set, plus orbit data in inertial mode."""
    trajectories: TrajectorySet
    center: Optional[CenterType] = None
    orbit: Optional[OrbitParameters] = None

    @property
    def is_inertial(self) -> bool:
        return self.center is not None


# =============================================================================
# VALIDATION
# =============================================================================

def _as_state_block(state, idx: int) -> np.ndarray:
    block = np.array(state, dtype=float)
    if block.ndim == 1:
        block = block.reshape(-1, 1)
    if block.ndim != 2:
        raise MalformedState(f"object {idx + 1}: state must be a 6xN array")
    rows = block.shape[0]
    if rows < NUM_STATE_COMPONENTS:
        raise MalformedState(f"object {idx + 1}: too little data ({rows} state rows, expected 6)")
    if rows > NUM_STATE_COMPONENTS:
        raise MalformedState(f"object {idx + 1}: too much data ({rows} state rows, expected 6)")
    if block.shape[1] == 0:
        raise MalformedState(f"object {idx + 1}: state block has no samples")
    return block


def _check_times(times: np.ndarray, idx: int, start_time: float, stop_time: float):
    if times[0] != start_time:
        raise TimeMismatch(
            f"objects start times differ (object {idx + 1} starts at {times[0]}, "
            f"object 1 at {start_time})"
        )
    if times[-1] != stop_time:
        raise TimeMismatch(
            f"objects stop time differ (object {idx + 1} stops at {times[-1]}, "
            f"object 1 at {stop_time})"
        )
    if np.any(times < 0):
        raise InvalidTime(f"object {idx + 1}: negative time")
    if np.any(np.diff(times) <= 0):
        raise InvalidTime(f"object {idx + 1}: invalid time data (timestamps must strictly increase)")


def load_trajectories(
    states: Sequence,
    times: Sequence,
    mode=None,
    orbit: Union[OrbitParameters, Mapping, None] = None,
) -> LoadedTrajectories:
    """
    Validate raw per-object arrays and build the trajectory set.

    Checks run in this order, each raising its own error:
        no objects                      -> InvalidData
        state rows != 6                 -> MalformedState
        unknown mode keyword            -> InvalidOption
        start/stop differs from obj 1   -> TimeMismatch
        negative / non-increasing time  -> InvalidTime
        missing orbit data (inertial)   -> MissingOrbitParameters

    Args:
        states: per-object 6xN state blocks
        times: per-object N-length time vectors
        mode: None, "earth-centered", "sun-centered" or a CenterType
        orbit: OrbitParameters or a mapping of the orbit variables

    Returns:
        LoadedTrajectories
    """
    if states is None or len(states) == 0:
        raise InvalidData("invalid data: no objects")
    if times is None or len(times) != len(states):
        raise InvalidData(
            f"invalid data: {len(states)} state blocks but "
            f"{0 if times is None else len(times)} time vectors"
        )

    blocks = []
    vectors = []
    for idx, (state, t) in enumerate(zip(states, times)):
        block = _as_state_block(state, idx)
        t = np.array(t, dtype=float).reshape(-1)
        if t.shape[0] != block.shape[1]:
            raise MalformedState(
                f"object {idx + 1}: {block.shape[1]} state samples but {t.shape[0]} timestamps"
            )
        blocks.append(block)
        vectors.append(t)

    center = CenterType.from_option(mode)

    start_time = vectors[0][0]
    stop_time = vectors[0][-1]
    for idx, t in enumerate(vectors):
        _check_times(t, idx, start_time, stop_time)

    tracks = []
    for block, t in zip(blocks, vectors):
        block.setflags(write=False)
        t.setflags(write=False)
        tracks.append(ObjectTrack(states=block, times=t))
    trajectories = TrajectorySet(tracks=tuple(tracks))

    orbit_params = None
    if center is not None:
        if orbit is None:
            raise MissingOrbitParameters(
                f"'{center.keyword}' requires orbit variables: {', '.join(ORBIT_KEYS)}"
            )
        orbit_params = orbit if isinstance(orbit, OrbitParameters) else OrbitParameters.from_mapping(orbit)
        reference_samples = trajectories[0].num_samples
        if orbit_params.theta.shape[0] != reference_samples:
            raise MalformedState(
                f"theta has {orbit_params.theta.shape[0]} samples, "
                f"object 1 has {reference_samples}"
            )

    return LoadedTrajectories(trajectories=trajectories, center=center, orbit=orbit_params)


# =============================================================================
# FILE READERS
# =============================================================================

def _read_mat(path: Path) -> Tuple[list, list, dict]:
    from scipy.io import loadmat

    data = loadmat(str(path), squeeze_me=False, struct_as_record=False)
    if "traject" not in data:
        raise InvalidData(f"{path.name}: no 'traject' variable")

    traject = data["traject"].reshape(-1)[0]
    sc = getattr(traject, "sc", None)
    if sc is None:
        raise InvalidData(f"{path.name}: 'traject' has no 'sc' field")
    objects = np.asarray(sc).reshape(-1)

    states = [np.asarray(obj.state, dtype=float) for obj in objects]
    times = [np.asarray(obj.t, dtype=float).reshape(-1) for obj in objects]

    orbit = {key: data[key] for key in ORBIT_SCALARS + ("theta",) if key in data}
    if len(objects) > 0:
        r = getattr(objects[0], "r", None)
        if r is not None and np.asarray(r).size > 0:
            orbit["r"] = r
    return states, times, orbit


def _read_npz(path: Path) -> Tuple[list, list, dict]:
    states = []
    times = []
    with np.load(path) as data:
        idx = 0
        while f"state_{idx}" in data.files:
            if f"t_{idx}" not in data.files:
                raise InvalidData(f"{path.name}: state_{idx} has no matching t_{idx}")
            states.append(data[f"state_{idx}"].copy())
            times.append(data[f"t_{idx}"].copy())
            idx += 1
        orbit = {key: data[key].copy() for key in ORBIT_KEYS if key in data.files}
    return states, times, orbit


READERS = {
    ".mat": _read_mat,
    ".npz": _read_npz,
}


def read_trajectory_file(path, mode=None) -> LoadedTrajectories:
    """Read and validate a trajectory file (.mat or .npz)."""
    path = Path(path)
    if not path.is_file():
        raise FileNotFoundError(f"file not found: {path}")

    reader = READERS.get(path.suffix.lower())
    if reader is None:
        raise InvalidData(f"unsupported file type '{path.suffix}' (expected .mat or .npz)")

    states, times, orbit = reader(path)
    loaded = load_trajectories(states, times, mode=mode, orbit=orbit or None)

    print(f"[Loader] {path.name}: {loaded.trajectories.num_objects} objects, "
          f"t = {loaded.trajectories.start_time:g} .. {loaded.trajectories.stop_time:g}")
    if loaded.is_inertial:
        print(f"[Loader] Inertial frame: {loaded.center.keyword}")
    return loaded


def write_trajectory_file(path, states: Sequence, times: Sequence,
                          orbit: Optional[OrbitParameters] = None) -> Path:
    """Write per-object arrays (and optional orbit data) as an .npz input file."""
    path = Path(path)
    arrays = {}
    for idx, (state, t) in enumerate(zip(states, times)):
        arrays[f"state_{idx}"] = np.asarray(state, dtype=float)
        arrays[f"t_{idx}"] = np.asarray(t, dtype=float)
    if orbit is not None:
        for key in ORBIT_KEYS:
            arrays[key] = np.asarray(getattr(orbit, key), dtype=float)
    np.savez(path, **arrays)
    return path
