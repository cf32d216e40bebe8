"""Scripted conversation simulator."""

from .sim import ISim, Sim, SimTurn

__all__ = ["ISim", "Sim", "SimTurn"]
