"""
Reader for tagged IMU/ODOM/GNSS text records.

Each non-empty line is a whitespace separated record; lines starting with
'#' are comments::

    IMU  time gx gy gz ax ay az
    ODOM time left_pulse right_pulse
    GNSS time lat lon alt heading heading_valid
"""

import logging
import os
from typing import Any, Callable, Dict, Iterator, List, Optional, Union

import numpy as np

from .gnss import GNSS, GpsStatusType
from .imu import IMU
from .odom import Odom

logger = logging.getLogger(__name__)

Record = Union[IMU, Odom, GNSS]


class TxtIO:
    """
    Parses a record file and dispatches readings to registered callbacks.

    Example:
        TxtIO(path).set_imu_process_func(on_imu).set_gnss_process_func(on_gnss).go()
    """

    def __init__(self, file_path: str):
        self.file_path = file_path
        self.imu_proc: Optional[Callable[[IMU], Any]] = None
        self.odom_proc: Optional[Callable[[Odom], Any]] = None
        self.gnss_proc: Optional[Callable[[GNSS], Any]] = None

        # Statistics
        self.line_count = 0
        self.parse_errors = 0

    def set_imu_process_func(self, imu_proc: Callable[[IMU], Any]) -> 'TxtIO':
        self.imu_proc = imu_proc
        return self

    def set_odom_process_func(self, odom_proc: Callable[[Odom], Any]) -> 'TxtIO':
        self.odom_proc = odom_proc
        return self

    def set_gnss_process_func(self, gnss_proc: Callable[[GNSS], Any]) -> 'TxtIO':
        self.gnss_proc = gnss_proc
        return self

    @staticmethod
    def parse_imu(fields: List[str]) -> Optional[IMU]:
        """Parse the fields following an IMU tag."""
        if len(fields) < 7:
            return None
        try:
            values = [float(f) for f in fields[:7]]
        except ValueError:
            return None
        return IMU(values[0], values[1:4], values[4:7])

    @staticmethod
    def parse_odom(fields: List[str]) -> Optional[Odom]:
        """Parse the fields following an ODOM tag."""
        if len(fields) < 3:
            return None
        try:
            time, wl, wr = (float(f) for f in fields[:3])
        except ValueError:
            return None
        return Odom(time, wl, wr)

    @staticmethod
    def parse_gnss(fields: List[str]) -> Optional[GNSS]:
        """
        Parse the fields following a GNSS tag.

        The record format carries no fix quality, readings are tagged as
        fixed solutions.
        """
        if len(fields) < 6:
            return None
        try:
            time, lat, lon, alt, heading = (float(f) for f in fields[:5])
            heading_valid = bool(int(float(fields[5])))
        except ValueError:
            return None
        return GNSS(unix_time=time,
                    status=GpsStatusType.GNSS_FIXED_SOLUTION,
                    lat_lon_alt=np.array([lat, lon, alt]),
                    heading=heading,
                    heading_valid=heading_valid)

    def parse_line(self, line: str) -> Optional[Record]:
        """
        Parse one line.

        Returns:
            The reading, or None for blank lines, comments, unknown tags and
            malformed records
        """
        line = line.strip()
        if not line or line.startswith('#'):
            return None

        fields = line.split()
        data_type, fields = fields[0], fields[1:]

        parsers = {
            'IMU': self.parse_imu,
            'ODOM': self.parse_odom,
            'GNSS': self.parse_gnss,
        }
        parser = parsers.get(data_type)
        if parser is None:
            return None

        record = parser(fields)
        if record is None:
            self.parse_errors += 1
            logger.warning("Malformed %s record at line %d: %s", data_type,
                           self.line_count, line)
        return record

    def records(self) -> Iterator[Record]:
        """Iterate over all readings in the file."""
        with open(self.file_path, 'r') as f:
            for line in f:
                self.line_count += 1
                record = self.parse_line(line)
                if record is not None:
                    yield record

    def go(self):
        """Read the whole file, invoking the callback for each reading."""
        if not os.path.exists(self.file_path):
            logger.error("Unable to find the file: %s", self.file_path)
            return

        for record in self.records():
            if isinstance(record, IMU) and self.imu_proc:
                self.imu_proc(record)
            elif isinstance(record, Odom) and self.odom_proc:
                self.odom_proc(record)
            elif isinstance(record, GNSS) and self.gnss_proc:
                self.gnss_proc(record)

        logger.info("done.")

    def get_statistics(self) -> Dict[str, Any]:
        """Get reader statistics."""
        return {
            'lines_processed': self.line_count,
            'parse_errors': self.parse_errors,
            'error_rate': self.parse_errors / max(1, self.line_count),
        }
