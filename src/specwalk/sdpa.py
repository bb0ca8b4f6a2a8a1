"""Export LMIs to the sparse SDPA format used by SDP solvers.

The SDPA primal problem is

.. math::
   \\min_x c^Tx \\quad \\text{s.t.} \\quad \\sum_k x_kF_k - F_0 \\succcurlyeq 0,

so an LMI :math:`A_0 + \\sum_k x_kA_k \\succcurlyeq 0` is written with
:math:`F_0 = -A_0` and :math:`F_k = A_k`.
"""
from pathlib import Path

import numpy as np

from .errors import DimensionMismatch
from .lmi import LMI


def _format_number(x):
    return f"{x:.17g}"


def format_sdpa(lmi, objective, comment=None, tol=0):
    """Render an LMI and linear objective in the sparse SDPA format.

    Parameters
    ----------
    lmi : LMI or Spectrahedron
        The LMI. A spectrahedron is replaced by its LMI.
    objective : np.ndarray, shape (n,)
        The objective vector ``c``.
    comment : str or None
        Optional comment placed on the first line.
    tol : float, non-negative
        Matrix entries with magnitude at most ``tol`` are omitted.

    Returns
    -------
    : str
        The problem in SDPA sparse format.
    """
    if not isinstance(lmi, LMI):
        lmi = lmi.lmi
    objective = np.array(objective, dtype=float)
    if objective.shape != (lmi.dim,):
        raise DimensionMismatch(
            f"Objective has shape {objective.shape}, expected ({lmi.dim},)."
        )

    lines = []
    if comment is not None:
        for line in comment.splitlines():
            lines.append(f'"{line}')
    lines.append(f"{lmi.dim} = mDIM")
    lines.append("1 = nBLOCK")
    lines.append(f"{lmi.size} = bLOCKsTRUCT")
    lines.append(" ".join(_format_number(c) for c in objective))

    rows, cols = np.triu_indices(lmi.size)
    Fs = [-lmi.A0] + list(lmi.coefficients)
    for k, F in enumerate(Fs):
        values = F[rows, cols]
        for i, j, v in zip(rows, cols, values):
            if abs(v) > tol:
                lines.append(f"{k} 1 {i + 1} {j + 1} {_format_number(v)}")
    return "\n".join(lines) + "\n"


def write_sdpa(path, lmi, objective, comment=None, tol=0):
    """Write an LMI and linear objective to a file in sparse SDPA format.

    See :func:`format_sdpa` for the parameters.
    """
    Path(path).write_text(format_sdpa(lmi, objective, comment=comment, tol=tol))
