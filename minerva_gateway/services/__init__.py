# minerva_gateway/services/__init__.py
"""服务层模块"""

from .demo import DemoDataset, is_demo
from .gpa import aggregate_gpa
from .portal_service import PortalService

__all__ = ["DemoDataset", "PortalService", "aggregate_gpa", "is_demo"]
