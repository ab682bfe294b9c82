"""
KitStock Kernel

Inventory consistency and assignment lifecycle engine for an
educational-kit distributor:
- Non-negative, race-free stock counters for raw materials,
  pre-processed goods and kits
- Kit bill of materials (packets of material lines)
- Stock commitment and release driven by client assignment status
"""

__version__ = "0.1.0"
