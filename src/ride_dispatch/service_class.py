"""Requested vehicle categories that both pricing and matching key on."""

from enum import Enum


class ServiceClass(str, Enum):
    """Service class a rider requests; also the class of a registered vehicle."""

    CAR = "car"
    MOTORCYCLE = "motorcycle"
