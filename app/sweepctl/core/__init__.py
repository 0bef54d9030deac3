"""Core purge-decision engine for sweepctl.

Exemption policies, id sets, the decision pipeline, planning and
execution live here.
"""
