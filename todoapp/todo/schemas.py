"""
Todo 数据模型

领域层的 Todo 是不可变值对象，用例通过 dataclasses.replace 派生新版本。
"""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Todo:
    """单个 Todo 条目"""

    id: int  # 插入前为 0，由数据库生成
    text: str
    done: bool
    index: int  # 从 0 开始的位置，全表连续无空洞
