"""Error types raised by the terrain core."""


class InvalidArgument(ValueError):
    """Argument outside the domain an operation accepts."""


class IndexOutOfRange(InvalidArgument, IndexError):
    """Control point index outside the grid."""


class GeometryUnavailable(RuntimeError):
    """Surface kernel produced no usable result (degenerate or disjoint input)."""


class UserCancelled(Exception):
    """Interactive pick was aborted before a point was supplied."""


class SceneError(RuntimeError):
    """Scene sink rejected an add or delete."""
