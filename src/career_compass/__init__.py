"""Career Compass.

Decision-support tools for school leavers: a career decision matrix, an APS and
NSC pass-level calculator, an NSFAS funding wizard, a weekly study planner and
application checklists, all saved in a local namespaced store.
"""

__version__ = "0.1.0"

from .store import MemorySubstrate, SqliteSubstrate, Store
from .workspace import Workspace

__all__ = ["MemorySubstrate", "SqliteSubstrate", "Store", "Workspace"]
