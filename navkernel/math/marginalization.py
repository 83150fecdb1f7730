"""
Schur-complement marginalization of information matrices.
"""

import numpy as np

from ..errors import InvalidArgument
from .constants import MARGINALIZE_SV_EPS


def marginalize(H, start: int, end: int) -> np.ndarray:
    """
    Eliminate the variables [start, end] (inclusive) from an information matrix.

    With the matrix partitioned into a (before), b (eliminated) and c (after)::

        a  | ab | ac       a*  | 0 | ac*
        ba | b  | bc  -->  0   | 0 | 0
        ca | cb | c        ca* | 0 | c*

    The b block is moved to the trailing position, the Schur complement
    ``H_rr - H_rb * pinv(H_bb) * H_br`` replaces the retained block, the b
    rows and columns are zeroed and the original index layout is restored.
    Singular values of H_bb at or below 1e-6 are treated as zero in the
    pseudo-inverse.

    Args:
        H: Symmetric (n, n) information matrix
        start: First eliminated index
        end: Last eliminated index

    Returns:
        New (n, n) matrix, H is not modified

    Raises:
        InvalidArgument: H is not square or the range is outside [0, n)
    """
    H = np.asarray(H, dtype=float)
    if H.ndim != 2 or H.shape[0] != H.shape[1]:
        raise InvalidArgument(f"H must be square, got shape {H.shape}")
    n = H.shape[0]
    if not 0 <= start <= end < n:
        raise InvalidArgument(f"invalid block [{start}, {end}] for a {n}x{n} matrix")

    # Reorder: a | c | b
    kept = np.r_[0:start, end + 1:n]
    dropped = np.arange(start, end + 1)
    order = np.concatenate([kept, dropped])
    Hn = H[np.ix_(order, order)]

    r = len(kept)
    H_rr = Hn[:r, :r]
    H_rb = Hn[:r, r:]
    H_br = Hn[r:, :r]
    H_bb = Hn[r:, r:]

    # Schur complement with an SVD pseudo-inverse of the eliminated block
    u, sv, vt = np.linalg.svd(H_bb)
    sv_inv = np.zeros_like(sv)
    mask = sv > MARGINALIZE_SV_EPS
    sv_inv[mask] = 1.0 / sv[mask]
    inv_Hb = vt.T @ np.diag(sv_inv) @ u.T

    Hn_marg = np.zeros_like(Hn)
    Hn_marg[:r, :r] = H_rr - H_rb @ inv_Hb @ H_br

    # Inverse reorder
    res = np.zeros_like(H)
    res[np.ix_(order, order)] = Hn_marg
    return res
