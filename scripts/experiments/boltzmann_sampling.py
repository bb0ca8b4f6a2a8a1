#!/usr/bin/env python3
"""Sample a random spectrahedron with the Boltzmann walk at decreasing
temperatures and track the best objective value found.

The problem is also written in SDPA format so that the result can be compared
against an SDP solver.
"""
import argparse
import logging

import numpy as np

import specwalk as sw


# number of cooling rounds
NUM_ROUNDS = 5

# temperature is multiplied by this factor after every round
COOLING_FACTOR = 0.5


def main():
    np.set_printoptions(suppress=True, precision=6)
    logging.basicConfig(level=logging.INFO)

    parser = argparse.ArgumentParser()
    parser.add_argument("-n", "--dim", type=int, default=5, help="Number of variables.")
    parser.add_argument("-m", "--size", type=int, default=6, help="Size of the LMI matrices.")
    parser.add_argument("-N", "--samples", type=int, default=100, help="Samples per round.")
    parser.add_argument("-W", "--walk-length", type=int, default=1, help="Walk length.")
    parser.add_argument("--seed", type=int, default=0, help="Random seed.")
    parser.add_argument("--sdpa", default="sdp_prob.dat-s", help="SDPA file to write.")
    parser.add_argument("--npz", help="If given, save the samples to this file.")
    args = parser.parse_args()

    rng = np.random.default_rng(args.seed)
    lmi = sw.random_lmi(dim=args.dim, size=args.size, rng=rng)
    body = sw.Spectrahedron(lmi)

    # random objective direction
    c = sw.random_points_on_hypersphere(dim=args.dim - 1, rng=rng)
    sw.write_sdpa(args.sdpa, lmi, c, comment=f"random LMI n={args.dim} m={args.size}")
    print(f"Wrote SDPA problem to {args.sdpa}")

    pre = sw.prepare(body, rng=rng)
    print(f"inner radius = {pre.inner_radius}, diameter = {pre.diameter}")

    T = 1.0
    point = pre.inner_point
    all_points = []
    best = np.inf
    for k in range(NUM_ROUNDS):
        result = sw.sample_points(
            body,
            args.samples,
            walk="boltzmann",
            walk_length=args.walk_length,
            start=point,
            preprocessed=pre,
            objective=c,
            temperature=T,
            rng=rng,
        )
        values = result.points @ c
        best = min(best, np.min(values))
        print(
            f"round {k}: T = {T}, mean = {np.mean(values)}, best = {best}, "
            f"degraded = {result.n_degraded}"
        )

        all_points.append(result.points)
        point = result.points[-1]
        T *= COOLING_FACTOR

    # finish at the final temperature with hit-and-run, which needs no
    # reflections
    result = sw.sample_points(
        body,
        args.samples,
        walk="hit_and_run_boltzmann",
        walk_length=args.walk_length,
        start=point,
        objective=c,
        temperature=T,
        rng=rng,
    )
    values = result.points @ c
    best = min(best, np.min(values))
    print(f"hit-and-run: T = {T}, mean = {np.mean(values)}, best = {best}")

    if args.npz is not None:
        np.savez(
            args.npz,
            points=np.array(all_points),
            hit_and_run_points=result.points,
            objective=c,
        )
        print(f"Saved samples to {args.npz}")


main()
