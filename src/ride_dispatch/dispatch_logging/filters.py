"""Log filters that keep rider personal data out of log output."""

import logging
import re


class PIIFilter(logging.Filter):
    """Masks e-mail addresses and phone numbers, and coarsens coordinates.

    Coordinate pairs are cut to two decimals (roughly a kilometre), enough to
    debug matching radius issues without logging where a rider lives.
    """

    EMAIL_PATTERN = re.compile(r"[a-zA-Z0-9_.+-]+@[a-zA-Z0-9-]+\.[a-zA-Z0-9-.]+")
    PHONE_PATTERN = re.compile(r"(?<![\w.-])\+?\d{2,3}[-.\s]?\d{3,5}[-.\s]?\d{4}\b")
    COORDINATE_PATTERN = re.compile(r"(-?\d{1,3}\.\d{2})\d+(\s*,\s*)(-?\d{1,3}\.\d{2})\d+")

    def filter(self, record: logging.LogRecord) -> bool:
        if isinstance(record.msg, str):
            msg = record.msg
            if "@" in msg:
                msg = self.EMAIL_PATTERN.sub("[EMAIL]", msg)
            if any(c.isdigit() for c in msg):
                msg = self.COORDINATE_PATTERN.sub(r"\1\2\3", msg)
                msg = self.PHONE_PATTERN.sub("[PHONE]", msg)
            record.msg = msg
        return True
