"""
Boundary layer: adapters to infrastructure outside the process.
"""
