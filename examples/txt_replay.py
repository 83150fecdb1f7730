#!/usr/bin/env python3
"""
Replay a tagged IMU/ODOM/GNSS record file through the navigation kernel.

Demonstrates the kernel without any estimator:
- static IMU statistics for bias initialization (batch + incremental)
- GNSS to UTM pose conversion relative to the first fix
- gyro-only attitude propagation into NavState snapshots
- pose interpolation of GNSS poses at odometry timestamps

Run with --simulate to generate a circular drive instead of reading a file.
"""

import argparse
import logging
import os
import sys

import numpy as np
from scipy.spatial.transform import Rotation

# Add the package to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from navkernel.config import Config
from navkernel.geo import convert_gps_to_utm
from navkernel.math import (
    compute_mean_and_cov,
    exp_so3_dt,
    fit_plane,
    pose_interp,
    update_mean_and_cov,
)
from navkernel.math.constants import GRAVITY_MS2
from navkernel.sensors import GNSS, IMU, Odom, TxtIO
from navkernel.state import NavStated
from navkernel.utils import Timer

logger = logging.getLogger("txt_replay")

STATIC_INIT_TIME = 10.0  # Seconds of static IMU data used for bias estimation
CHUNK_SIZE = 100         # IMU samples per incremental statistics chunk


def simulate_records(path: str, duration: float = 60.0, dt: float = 0.01):
    """
    Write a simulated drive in record format.

    The vehicle stands still for STATIC_INIT_TIME seconds, then drives a
    circle at constant speed.
    """
    rng = np.random.default_rng(0)
    speed = 5.0            # m/s
    turn_radius = 50.0     # m
    omega = speed / turn_radius

    start_lat, start_lon = 31.2304, 121.4737
    earth_radius = 6371000.0

    with open(path, 'w') as f:
        f.write("# simulated circular drive\n")
        steps = int(duration / dt)
        for k in range(steps):
            t = k * dt
            moving = t >= STATIC_INIT_TIME
            tm = t - STATIC_INIT_TIME if moving else 0.0
            w = omega if moving else 0.0

            gyro = np.array([0.0, 0.0, w]) + rng.normal(0, 0.002, 3) + [0.001, -0.002, 0.0005]
            acce = np.array([0.0, speed * w, GRAVITY_MS2]) + rng.normal(0, 0.02, 3)
            f.write("IMU %.3f %.6f %.6f %.6f %.6f %.6f %.6f\n" % (t, *gyro, *acce))

            if k % 10 == 0:
                pulses = speed * 100.0 if moving else 0.0
                f.write("ODOM %.3f %.3f %.3f\n" % (t, pulses, pulses))

            if k % 100 == 0:
                x = turn_radius * np.sin(omega * tm)
                y = turn_radius * (1 - np.cos(omega * tm))
                lat = start_lat + np.degrees(y / earth_radius)
                lon = start_lon + np.degrees(x / (earth_radius * np.cos(np.radians(start_lat))))
                heading = (90.0 - np.degrees(omega * tm)) % 360.0
                f.write("GNSS %.3f %.9f %.9f %.3f %.3f %d\n" % (t, lat, lon, 10.0, heading, 1))


class ReplayProcessor:
    """Collects kernel results while a record file is replayed."""

    def __init__(self, config: Config, timer: Timer):
        self.config = config
        self.timer = timer

        self.static_imu = []
        self.bias_initialized = False
        self.gyro_bias = np.zeros(3)
        self.acce_mean = np.zeros(3)

        # Incremental gyro statistics over all static chunks
        self.chunk = []
        self.stat_count = 0
        self.stat_mean = np.zeros(3)
        self.stat_cov = np.zeros((3, 3))

        self.map_origin = None
        self.gnss_poses = []
        self.odom = []
        self.states = []
        self.last_imu = None

    def on_imu(self, imu: IMU):
        if not self.bias_initialized:
            self.static_imu.append(imu)
            self.chunk.append(imu)
            if len(self.chunk) == CHUNK_SIZE:
                self._merge_chunk()
            if imu.timestamp - self.static_imu[0].timestamp >= STATIC_INIT_TIME:
                self._init_bias()
            return

        state = self.states[-1]
        dt = imu.timestamp - self.last_imu.timestamp
        dR = exp_so3_dt(imu.gyro - self.gyro_bias, dt)
        R = state.R * Rotation.from_matrix(dR)
        self.states.append(NavStated(imu.timestamp, R, state.p, state.v,
                                     self.gyro_bias, state.ba))
        self.last_imu = imu

    def _merge_chunk(self):
        mean, cov = compute_mean_and_cov(self.chunk, lambda d: d.gyro)
        if self.stat_count == 0:
            self.stat_mean, self.stat_cov = mean, cov
        else:
            self.stat_mean, self.stat_cov = update_mean_and_cov(
                self.stat_count, self.stat_mean, self.stat_cov,
                len(self.chunk), mean, cov, unbiased=True)
        self.stat_count += len(self.chunk)
        self.chunk = []

    def _init_bias(self):
        gyro_mean, gyro_cov = self.timer.evaluate(
            lambda: compute_mean_and_cov(self.static_imu, lambda d: d.gyro), "static gyro stats")
        acce_mean, _ = compute_mean_and_cov(self.static_imu, lambda d: d.acce)
        self.gyro_bias = gyro_mean
        self.acce_mean = acce_mean
        self.bias_initialized = True
        self.last_imu = self.static_imu[-1]
        self.states.append(NavStated(self.last_imu.timestamp, bg=gyro_mean))

        logger.info("IMU initialized from %d samples", len(self.static_imu))
        logger.info("  gyro bias: %s, gyro std: %s", np.array2string(gyro_mean, precision=4),
                    np.array2string(np.sqrt(np.diag(gyro_cov)), precision=4))
        logger.info("  incremental gyro mean over %d samples: %s", self.stat_count,
                    np.array2string(self.stat_mean, precision=4))
        logger.info("  gravity norm: %.3f m/s²", np.linalg.norm(acce_mean))

    def on_odom(self, odom: Odom):
        self.odom.append(odom)

    def on_gnss(self, gnss: GNSS):
        antenna_pos = self.config.antenna_position
        antenna_angle = self.config.antenna_angle
        if self.map_origin is None:
            if not convert_gps_to_utm(gnss, antenna_pos, antenna_angle):
                return
            self.map_origin = np.array([gnss.utm.xy[0], gnss.utm.xy[1], gnss.utm.z])
            logger.info("Map origin set to %s", np.array2string(self.map_origin, precision=3))

        ok = self.timer.evaluate(
            lambda: convert_gps_to_utm(gnss, antenna_pos, antenna_angle, self.map_origin,
                                       self.config.require_heading),
            "gnss to utm")
        if ok:
            self.gnss_poses.append((gnss.unix_time, gnss.get_utm_pose()))

    def summarize(self):
        logger.info("GNSS poses: %d, odometry samples: %d, states: %d",
                    len(self.gnss_poses), len(self.odom), len(self.states))

        interpolated = 0
        for odom in self.odom:
            _, _, ok = pose_interp(odom.timestamp, self.gnss_poses,
                                   lambda d: d[0], lambda d: d[1],
                                   self.config.interpolation_time_th)
            interpolated += ok
        logger.info("Interpolated %d of %d odometry timestamps", interpolated, len(self.odom))

        if len(self.gnss_poses) >= 3:
            points = np.array([p.translation for _, p in self.gnss_poses])
            _, flat = fit_plane(points, self.config.fit_plane_eps)
            logger.info("GNSS trajectory is %s", "planar" if flat else "not planar")

        if self.states:
            logger.info("Final state: %s", self.states[-1])


def main():
    parser = argparse.ArgumentParser(description=__doc__,
                                     formatter_class=argparse.RawDescriptionHelpFormatter)
    parser.add_argument("data_file", nargs="?", help="Record file (defaults to the config value)")
    parser.add_argument("--config", help="JSON configuration file")
    parser.add_argument("--simulate", action="store_true",
                        help="Generate a simulated record file first")
    args = parser.parse_args()

    config = Config(args.config)
    config.setup_logging()

    data_file = args.data_file or config.data_file
    if args.simulate:
        data_file = args.data_file or "simulated.txt"
        simulate_records(data_file)
        logger.info("Simulated records written to %s", data_file)

    timer = Timer()
    processor = ReplayProcessor(config, timer)

    reader = TxtIO(data_file)
    reader.set_imu_process_func(processor.on_imu) \
          .set_odom_process_func(processor.on_odom) \
          .set_gnss_process_func(processor.on_gnss)
    timer.evaluate(reader.go, "replay")

    processor.summarize()
    logger.info("Reader statistics: %s", reader.get_statistics())
    timer.print_all()
    if config.timer_dump_file:
        timer.dump_into_file(config.timer_dump_file)


if __name__ == "__main__":
    main()
