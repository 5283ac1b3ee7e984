"""
Common library for SimTrader trading simulation.
"""
