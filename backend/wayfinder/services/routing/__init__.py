"""Routing — visit-order optimization and route metrics.

Modules:
    geo              Haversine distance and distance sorting
    route_optimizer  Nearest-neighbor construction + 2-opt refinement
    transport_costs  Per-mode fare and fuel estimates for a route
    directions       Display formatting and map provider links
"""
