"""
todoapp：有序 Todo 列表服务
"""

__version__ = "0.1.0"
