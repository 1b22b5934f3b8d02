# -*- coding: utf-8 -*-
"""
Daily MITs (Most Important Tasks), capped per day.
"""

from .client import HttpMITRemote, MITApiError
from .reconciler import MITReconciler, MITRemote, OpState

__all__ = [
    'HttpMITRemote',
    'MITApiError',
    'MITReconciler',
    'MITRemote',
    'OpState',
]
