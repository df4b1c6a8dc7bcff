"""NumPy views of parsed toolpaths.

Provides:
    - Point-pair segment arrays per path, layer or whole result
    - Axis-aligned bounds of everything drawn
    - Total extruded (drawn) length

Used by:
    - CLI: summary output (bounds, drawn length)
    - Viewers: feeding line-segment buffers (one array per layer when
      layers are drawn separately)

Paths store two points per extruding move, so a path of 2N points is N
segments.  Arrays are float64, coordinates in machine units (mm).
A trailing odd point, which the interpreter never produces, is dropped.
"""

from typing import List, Optional, Tuple, Union

import numpy as np

from gcode_layers.interpreter.builder import Layer, Path
from gcode_layers.interpreter.parser import ParseResult


def path_segments(path: Path) -> np.ndarray:
    """Convert one path to a segment array.

    Parameters
    ----------
    path : Path
        Points as stored by the builder

    Returns
    -------
    np.ndarray
        Segments, shape (N, 2, 3); (0, 2, 3) for an empty path
    """
    n = len(path) // 2
    if n == 0:
        return np.empty((0, 2, 3), dtype=np.float64)
    pts = np.asarray(path[: 2 * n], dtype=np.float64)
    return pts.reshape(n, 2, 3)


def layer_segments(layer: Layer) -> np.ndarray:
    """All segments of a layer in drawing order, shape (N, 2, 3)."""
    parts = [path_segments(p) for p in layer.paths]
    if not parts:
        return np.empty((0, 2, 3), dtype=np.float64)
    return np.concatenate(parts, axis=0)


def result_segments(
    result: ParseResult,
    split_layers: bool = False
) -> Union[np.ndarray, List[np.ndarray]]:
    """Segments of a whole parse.

    Parameters
    ----------
    result : ParseResult
        Parser output
    split_layers : bool
        Return one array per layer instead of a single array, default False

    Returns
    -------
    Union[np.ndarray, List[np.ndarray]]
        (N, 2, 3) array, or list of per-layer arrays
    """
    per_layer = [layer_segments(layer) for layer in result.layers]
    if split_layers:
        return per_layer
    if not per_layer:
        return np.empty((0, 2, 3), dtype=np.float64)
    return np.concatenate(per_layer, axis=0)


def bounds(result: ParseResult) -> Optional[Tuple[np.ndarray, np.ndarray]]:
    """Compute axis-aligned bounding box of all drawn segments.

    Returns
    -------
    Optional[Tuple[np.ndarray, np.ndarray]]
        (min_xyz, max_xyz), each shape (3,); None if nothing was drawn
    """
    segs = result_segments(result)
    if segs.shape[0] == 0:
        return None
    pts = segs.reshape(-1, 3)
    return pts.min(axis=0), pts.max(axis=0)


def extruded_length(result: ParseResult) -> float:
    """Total length of drawn segments (Euclidean, mm)."""
    segs = result_segments(result)
    if segs.shape[0] == 0:
        return 0.0
    diffs = segs[:, 1, :] - segs[:, 0, :]
    return float(np.linalg.norm(diffs, axis=1).sum())
