"""
Composite operator implementations.

Colors are straight (non-premultiplied) float arrays of shape (H, W, 3),
alpha arrays have shape (H, W, 1). Every operator takes the backdrop
``(Cb, Ab)`` and the source ``(Cs, As)`` and returns ``(C, A)``.
"""
import numpy as np

from reflection_tools.composite.utils import clip, divide, union
from reflection_tools.constants import CompositeOp


def source_over(Cb, Ab, Cs, As):
    """Draw the source on top of the backdrop."""
    A = union(Ab, As)
    C = divide(Cs * As + Cb * Ab * (1.0 - As), A)
    return clip(C), clip(A)


def destination_out(Cb, Ab, Cs, As):
    """Erase the backdrop by the source alpha; source color is ignored."""
    A = Ab * (1.0 - As)
    return Cb, clip(A)


def composite_op(operation):
    """Return the operator function for a composite operation."""
    return COMPOSITE_FUNC[CompositeOp(operation)]


"""Composite operator table."""
COMPOSITE_FUNC = {
    CompositeOp.SOURCE_OVER: source_over,
    CompositeOp.DESTINATION_OUT: destination_out,
}


def empty(height, width):
    """Transparent color and alpha arrays."""
    return (
        np.zeros((height, width, 3), dtype=np.float32),
        np.zeros((height, width, 1), dtype=np.float32),
    )
