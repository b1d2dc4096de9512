"""Simulated robots for running the controller without hardware"""

from sim.simulated_robot import SimulatedRobot, SensorScripts

__all__ = ["SimulatedRobot", "SensorScripts"]
