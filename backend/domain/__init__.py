"""Domain layer for plan computation.

Questo package contiene la logica di business (calcolo dei target,
snapshot dei piani) disaccoppiata da API e infrastruttura.
"""
