#!/usr/bin/env python3
"""
Plot the GNSS trajectory of a record file in a local UTM map frame.

Usage: plot_gnss.py <records.txt> [--antenna-x X --antenna-y Y --antenna-angle DEG] [--save out.png]
"""

import argparse
import logging
import os
import sys

import numpy as np
import matplotlib.pyplot as plt

# Add the package to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from navkernel.config import configure_logging
from navkernel.geo import convert_gps_to_utm
from navkernel.sensors import TxtIO

logger = logging.getLogger("plot_gnss")


def load_gnss_trajectory(path, antenna_pos=(0.0, 0.0), antenna_angle=0.0):
    """
    Convert every GNSS record of a file to a map-frame position.

    The first convertible fix defines the map origin.

    Returns:
        (times, positions, headings): headings are yaw angles in radians,
        NaN where the reading had no valid heading
    """
    fixes = []
    TxtIO(path).set_gnss_process_func(fixes.append).go()

    map_origin = None
    times, positions, headings = [], [], []
    for gnss in fixes:
        if map_origin is None:
            if not convert_gps_to_utm(gnss, antenna_pos, antenna_angle):
                continue
            map_origin = np.array([gnss.utm.xy[0], gnss.utm.xy[1], gnss.utm.z])

        if not convert_gps_to_utm(gnss, antenna_pos, antenna_angle, map_origin):
            continue
        pose = gnss.get_utm_pose()
        times.append(gnss.unix_time)
        positions.append(pose.translation)
        headings.append(pose.rotation.as_euler("ZYX")[0] if gnss.heading_valid else np.nan)

    return np.array(times), np.array(positions).reshape(-1, 3), np.array(headings)


def plot_trajectory(positions, headings=None, states=None, ax=None):
    """
    Draw GNSS positions, optional heading arrows and optional NavState positions.

    Returns:
        The matplotlib axes
    """
    if ax is None:
        _, ax = plt.subplots(figsize=(8, 8))

    positions = np.asarray(positions).reshape(-1, 3)
    ax.scatter(positions[:, 0], positions[:, 1], s=12, c='red', label="GNSS Fix", alpha=0.7)

    if headings is not None and len(positions):
        valid = ~np.isnan(headings)
        ax.quiver(positions[valid, 0], positions[valid, 1],
                  np.cos(headings[valid]), np.sin(headings[valid]),
                  angles='xy', width=0.003, color='gray')

    if states:
        p = np.array([s.p for s in states], dtype=float)
        ax.plot(p[:, 0], p[:, 1], 'b-', label="NavState", linewidth=2)

    ax.set_xlabel("East (m)")
    ax.set_ylabel("North (m)")
    ax.set_title("Vehicle Trajectory (UTM map frame)")
    ax.grid(True)
    ax.axis('equal')
    ax.legend()
    return ax


def main():
    parser = argparse.ArgumentParser(description="Plot GNSS fixes of a record file")
    parser.add_argument("data_file")
    parser.add_argument("--antenna-x", type=float, default=0.0)
    parser.add_argument("--antenna-y", type=float, default=0.0)
    parser.add_argument("--antenna-angle", type=float, default=0.0, help="degrees")
    parser.add_argument("--save", help="Write the figure to this file instead of showing it")
    args = parser.parse_args()

    configure_logging("INFO")
    _, positions, headings = load_gnss_trajectory(
        args.data_file, (args.antenna_x, args.antenna_y), args.antenna_angle)
    if len(positions) == 0:
        logger.error("No GNSS fix found in %s", args.data_file)
        sys.exit(1)

    ax = plot_trajectory(positions, headings)
    plt.tight_layout()
    if args.save:
        ax.figure.savefig(args.save)
        logger.info("Saved %s", args.save)
    else:
        plt.show()


if __name__ == "__main__":
    main()
