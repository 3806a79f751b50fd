"""
API Routes Package
"""
from . import (
    health,
    auth,
    users,
    slips,
    subscriptions,
)
