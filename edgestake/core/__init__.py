"""Core mathematics and configuration for the edgestake staking engine.

This package contains pure building blocks:

- ``odds_math`` — price-format conversion and cent rounding
- ``price``     — price/edge DTOs and the injectable ``PriceConverter``
- ``kelly``     — single-bet Kelly, reserve rate, optimal-set selection
- ``config``    — ``StakingOptions`` and ``SimulationSettings``
- ``errors``    — ``NoPositiveEdge`` and ``NoArbitrage``

Nothing in this package imports from ``edgestake.services``.
All modules are side-effect-free and unit-testable in isolation.
"""
