"""
Deterministic geometry engine.

Pure Python math. No I/O.
Given the dimensional answers from the intake wizard, produce the
EstimateMeasurements dict consumed by the summary/brief builder.
"""
