"""
stepsync - Step synchronization core for real-time strategy agents.

A remote engine advances in discrete steps and reports only stateless
snapshots. The core turns those snapshots into:
- A consistent, queryable World Model (with fog-of-war memory)
- Ordered events reconstructed from step-to-step diffs
- A speculative resource ledger for orders not yet confirmed
- Batched orders to send back each step
"""

__version__ = "0.1.0"
