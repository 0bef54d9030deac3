"""Entity operators for removing users and groups.

This module exports the operator classes for executing purge actions.
"""

from sweepctl.operators.base import Operator
from sweepctl.operators.group import GroupOperator
from sweepctl.operators.user import UserOperator

__all__ = ["GroupOperator", "Operator", "UserOperator"]
