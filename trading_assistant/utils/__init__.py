"""
Utility functions module.

Time helpers and the periodic timer shared by the price feed and the
recompute orchestrator.

Time Semantics:
- Tick timestamps are UTC wall-clock time taken when the simulation step runs
- Snapshots carry the timestamp of the tick or analysis that produced them
"""
