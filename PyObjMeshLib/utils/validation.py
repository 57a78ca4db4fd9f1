import numpy as np

from ..core.errors import AllocationError, InvalidArgumentError, OutOfRangeError


def ensure_mesh(mesh):
    if not hasattr(mesh, "geometry") or not hasattr(mesh, "faces"):
        raise InvalidArgumentError("mesh must have geometry and faces")


def ensure_triples(data, what: str = "data") -> np.ndarray:
    try:
        arr = np.asarray(data, dtype=np.float64).reshape(-1)
    except MemoryError as exc:
        raise AllocationError(f"cannot allocate {what} buffer") from exc
    except (TypeError, ValueError) as exc:
        raise InvalidArgumentError(f"{what} must be numeric: {exc}") from exc
    if arr.size % 3 != 0:
        raise InvalidArgumentError(f"{what} length {arr.size} is not a multiple of 3")
    return arr


def ensure_face_rows(data, width: int) -> np.ndarray:
    try:
        raw = np.asarray(data)
        as_float = raw.astype(np.float64) if raw.dtype.kind not in "iu" else None
        arr = raw.astype(np.int64)
    except MemoryError as exc:
        raise AllocationError("cannot allocate face buffer") from exc
    except (TypeError, ValueError) as exc:
        raise InvalidArgumentError(f"face data must be integer rows: {exc}") from exc
    if as_float is not None and (not np.all(np.isfinite(as_float)) or np.any(as_float != arr)):
        raise InvalidArgumentError("face indices must be integral")
    if arr.size == 0:
        return np.empty((0, width), np.int64)
    if arr.ndim == 1 and arr.size == width:
        arr = arr.reshape(1, width)
    if arr.ndim != 2 or arr.shape[1] != width:
        raise InvalidArgumentError(f"face rows must have shape (n, {width}), got {arr.shape}")
    return arr


def check_index(i, count: int, what: str) -> int:
    if isinstance(i, (bool, np.bool_)) or not isinstance(i, (int, np.integer)):
        raise OutOfRangeError(f"{what} index must be an integer, got {type(i).__name__}")
    i = int(i)
    if i < 0 or i >= count:
        raise OutOfRangeError(f"{what} index {i} out of range [0, {count})")
    return i
