"""Error types raised while loading trajectories and recording movies."""


class AnimatedError(Exception):
    """Base class for every error raised by the animator."""


# Loading / validation (fatal, abort session construction)

class InvalidData(AnimatedError):
    """No objects, or an input file that cannot be interpreted."""


class MissingOrbitParameters(InvalidData):
    """Inertial mode was requested but the orbit variables are absent."""


class MalformedState(AnimatedError):
    """A state block does not carry exactly six components per sample."""


class InvalidOption(AnimatedError):
    """Unknown frame-centering keyword."""


class TimeMismatch(AnimatedError):
    """An object's start or stop time differs from the first object's."""


class InvalidTime(AnimatedError):
    """Negative or non strictly increasing timestamps."""


# Recording lifecycle (non-fatal, turned into diagnostics by the controller)

class OutputExists(AnimatedError):
    """The recording target already exists; it is never overwritten."""


class OutputMissing(AnimatedError):
    """Recording was stopped without a previously opened output."""
