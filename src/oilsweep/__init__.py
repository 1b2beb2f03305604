"""OILSWEEP - autonomous boats cleaning up wind-driven oil spills.

Getting started:
    from oilsweep import create_simulation

    sim = create_simulation("single_boat")
    sim.add_observer(lambda msg: print(msg["data"]["reason"]))
    sim.start()
"""

from oilsweep.simulation import CleanupSimulation, create_simulation

__version__ = "0.1.0"

__all__ = ["CleanupSimulation", "create_simulation", "__version__"]
