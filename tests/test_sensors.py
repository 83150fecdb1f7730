#!/usr/bin/env python3
"""
Unit tests for sensor readings, the record reader and NavState.
"""

import dataclasses
import os
import sys
import tempfile
import unittest

import numpy as np
from scipy.spatial.transform import Rotation

# Add package to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from navkernel.math.interpolation import SE3
from navkernel.sensors import GNSS, IMU, GpsStatusType, Odom, TxtIO
from navkernel.state import NavState, NavStated, NavStatef


RECORDS = """# test records
IMU 0.00 0.01 0.02 0.03 0.1 0.2 9.81
IMU 0.01 0.01 0.02 0.03 0.1 0.2 9.80
ODOM 0.00 100 102

GNSS 0.00 31.2304 121.4737 10.0 45.0 1
IMU 0.02 bad 0.02 0.03 0.1 0.2 9.80
GNSS 1.00 31.2305 121.4738 10.5 0.0 0
CAMERA 0.03 img.png
ODOM 0.10 101
"""


class TestReadings(unittest.TestCase):
    """Test the reading value types."""

    def test_imu_is_immutable(self):
        """Test IMU immutability."""
        imu = IMU(1.0, [0.1, 0.2, 0.3], [0.0, 0.0, 9.8])
        with self.assertRaises(dataclasses.FrozenInstanceError):
            imu.timestamp = 2.0
        with self.assertRaises(ValueError):
            imu.gyro[0] = 1.0

    def test_imu_copies_input(self):
        """Test IMU vectors are copied."""
        gyro = np.array([0.1, 0.2, 0.3])
        imu = IMU(0.0, gyro, np.zeros(3))
        gyro[0] = 5.0
        self.assertEqual(imu.gyro[0], 0.1)

    def test_odom_is_immutable(self):
        """Test odometry immutability."""
        odom = Odom(1.0, 10.0, 11.0)
        with self.assertRaises(dataclasses.FrozenInstanceError):
            odom.left_pulse = 0.0

    def test_status_codes(self):
        """Test fix quality code mapping."""
        self.assertIs(GpsStatusType.from_code(4), GpsStatusType.GNSS_FIXED_SOLUTION)
        self.assertIs(GpsStatusType.from_code(5), GpsStatusType.GNSS_FLOAT_SOLUTION)
        self.assertIs(GpsStatusType.from_code(0), GpsStatusType.GNSS_NOT_EXIST)
        self.assertIs(GpsStatusType.from_code(7), GpsStatusType.GNSS_OTHER)

    def test_gnss_defaults(self):
        """Test GNSS default fields."""
        gnss = GNSS()
        self.assertFalse(gnss.utm_valid)
        self.assertFalse(gnss.utm_pose_valid)
        self.assertIs(gnss.status, GpsStatusType.GNSS_NOT_EXIST)


class TestTxtIO(unittest.TestCase):
    """Test parsing and dispatching of record files."""

    def setUp(self):
        fd, self.path = tempfile.mkstemp(suffix=".txt")
        with os.fdopen(fd, 'w') as f:
            f.write(RECORDS)

    def tearDown(self):
        os.remove(self.path)

    def test_dispatch(self):
        """Test callback dispatch and parsing."""
        imus, odoms, fixes = [], [], []
        reader = TxtIO(self.path)
        reader.set_imu_process_func(imus.append) \
              .set_odom_process_func(odoms.append) \
              .set_gnss_process_func(fixes.append)
        with self.assertLogs('navkernel.sensors.txt_io', level='WARNING'):
            reader.go()

        self.assertEqual(len(imus), 2)
        self.assertEqual(len(odoms), 1)
        self.assertEqual(len(fixes), 2)

        np.testing.assert_allclose(imus[0].gyro, [0.01, 0.02, 0.03])
        np.testing.assert_allclose(imus[1].acce, [0.1, 0.2, 9.80])
        self.assertEqual(odoms[0].right_pulse, 102.0)

        self.assertTrue(fixes[0].heading_valid)
        self.assertEqual(fixes[0].heading, 45.0)
        self.assertEqual(fixes[0].altitude, 10.0)
        self.assertIs(fixes[0].status, GpsStatusType.GNSS_FIXED_SOLUTION)
        self.assertFalse(fixes[1].heading_valid)

        stats = reader.get_statistics()
        self.assertEqual(stats['lines_processed'], 10)
        self.assertEqual(stats['parse_errors'], 2)

    def test_missing_callbacks_are_skipped(self):
        """Test reading with only some callbacks set."""
        fixes = []
        with self.assertLogs('navkernel.sensors.txt_io', level='INFO'):
            TxtIO(self.path).set_gnss_process_func(fixes.append).go()
        self.assertEqual(len(fixes), 2)

    def test_records_generator(self):
        """Test record iteration."""
        kinds = [type(r).__name__ for r in TxtIO(self.path).records()]
        self.assertEqual(kinds, ['IMU', 'IMU', 'Odom', 'GNSS', 'GNSS'])

    def test_missing_file(self):
        """Test missing input file."""
        called = []
        with self.assertLogs('navkernel.sensors.txt_io', level='ERROR'):
            TxtIO(self.path + ".missing").set_imu_process_func(called.append).go()
        self.assertEqual(called, [])

    def test_parse_helpers(self):
        """Test static record parsers."""
        self.assertIsNone(TxtIO.parse_imu(['1.0', '2.0']))
        self.assertIsNone(TxtIO.parse_gnss(['1.0', 'a', '2', '3', '4', '1']))
        odom = TxtIO.parse_odom(['0.5', '3', '4'])
        self.assertEqual((odom.timestamp, odom.left_pulse, odom.right_pulse), (0.5, 3.0, 4.0))


class TestNavState(unittest.TestCase):
    """Test the navigation state container."""

    def test_defaults(self):
        """Test default state."""
        state = NavStated()
        np.testing.assert_array_equal(state.p, np.zeros(3))
        np.testing.assert_allclose(state.R.as_matrix(), np.eye(3))
        self.assertEqual(state.p.dtype, np.float64)

    def test_single_precision(self):
        """Test single precision state."""
        state = NavStatef(1.0, p=[1.0, 2.0, 3.0])
        for vec in (state.p, state.v, state.bg, state.ba):
            self.assertEqual(vec.dtype, np.float32)
        self.assertEqual(state.astype(np.float64).p.dtype, np.float64)

    def test_from_pose_and_back(self):
        """Test conversion from and to SE3."""
        pose = SE3(Rotation.from_rotvec([0.0, 0.1, 0.5]), [4.0, 5.0, 6.0])
        state = NavState.from_pose(2.0, pose, vel=[1.0, 0.0, 0.0])
        np.testing.assert_allclose(state.v, [1.0, 0.0, 0.0])
        np.testing.assert_allclose(state.get_se3().matrix(), pose.matrix(), atol=1e-12)

    def test_copy_is_independent(self):
        """Test state copying."""
        state = NavStated(p=[1.0, 2.0, 3.0])
        other = state.copy()
        other.p[0] = 10.0
        self.assertEqual(state.p[0], 1.0)

    def test_str(self):
        """Test string representation."""
        text = str(NavStated(bg=[0.1, 0.0, 0.0]))
        for key in ("p:", "v:", "q:", "bg:", "ba:"):
            self.assertIn(key, text)


if __name__ == '__main__':
    unittest.main()
