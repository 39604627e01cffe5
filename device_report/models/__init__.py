# Models package
from .device import Device, Template
from .measurement import Measurement

__all__ = ['Device', 'Template', 'Measurement']
