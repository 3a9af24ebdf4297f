"""
Evaluate a material law over a domain made of several phases.
"""

import logging

import numpy as np

from ..units import ShapeMismatchError

logger = logging.getLogger(__name__)


def _as_list(mat_params):
    if isinstance(mat_params, dict):
        return list(mat_params.values())
    return list(mat_params)


def compute_by_phase(out, phases, P, T, mat_params, slot, compute_inplace):
    """
    Fill ``out`` with law ``slot`` of each phase record in ``mat_params``.

    An integer ``phases`` array selects, point by point, the record whose
    ``phase`` id matches. A float ``phases`` array with one more (trailing)
    dimension than ``out`` holds the fraction of every record at every point,
    and the result is the fraction-weighted sum.
    """
    phases = np.asarray(phases)
    P = np.broadcast_to(P, out.shape)
    T = np.broadcast_to(T, out.shape)
    mat_params = _as_list(mat_params)

    if np.issubdtype(phases.dtype, np.integer):
        if phases.shape != out.shape:
            raise ShapeMismatchError(f"Phase ids have shape {phases.shape}, the data arrays {out.shape}")
        for params in mat_params:
            laws = getattr(params, slot)
            if not laws:
                continue
            mask = phases == params.phase
            if not mask.any():
                continue
            local = np.empty(np.count_nonzero(mask), dtype=out.dtype)
            compute_inplace(local, P[mask], T[mask], laws[0])
            out[mask] = local
        return out

    if phases.ndim != out.ndim + 1 or phases.shape[:-1] != out.shape:
        raise ShapeMismatchError(
            f"Phase ratios must have one dimension more than the data arrays, got {phases.shape} for {out.shape}"
        )
    if phases.shape[-1] != len(mat_params):
        raise ShapeMismatchError(
            f"Phase ratios hold {phases.shape[-1]} phases, {len(mat_params)} material records were given"
        )

    out[...] = 0.0
    local = np.empty_like(out)
    for i, params in enumerate(mat_params):
        fraction = phases[..., i]
        laws = getattr(params, slot)
        if not laws or not np.any(fraction > 0.0):
            continue
        compute_inplace(local, P, T, laws[0])
        out += local * fraction
    logger.debug("Computed %s for %d phases", slot, len(mat_params))
    return out


def law_of(law, slot):
    """The first law in ``slot`` when ``law`` is a phase record, ``law`` itself otherwise."""
    laws = getattr(law, slot, None)
    if isinstance(laws, tuple):
        if not laws:
            raise ValueError(f"Phase {law.name!r} has no {slot} law")
        return laws[0]
    return law
