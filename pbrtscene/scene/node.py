# -*- coding: utf-8 -*-
"""Узел графа сцены с компонентами."""
import threading
import uuid
import weakref
from typing import Optional, Type, TypeVar

from pbrtscene.math.mat4 import Mat4
from pbrtscene.scene.components import Component, TransformComponent

C = TypeVar("C", bound=Component)


class Node:
    """
    Родитель хранится слабой ссылкой, дети – сильными, поэтому
    отсоединённое поддерево не удерживается ссылками «вверх».
    """

    def __init__(self, name="Node"):
        self.uid = uuid.uuid4()
        self.name = name
        self.enabled = True
        self.children = []
        self._parent = None
        self.components = {}
        self.lock = threading.RLock()
        self.add_component(TransformComponent())

    @classmethod
    def root_node(cls, name: str = "Scene") -> "Node":
        return cls(name)

    @classmethod
    def child_node(cls, name: str, parent: "Node") -> "Node":
        node = cls(name)
        parent.add_child(node)
        return node

    # ----------------- иерархия -----------------
    @property
    def parent(self) -> Optional["Node"]:
        return self._parent() if self._parent is not None else None

    def add_child(self, node: "Node") -> None:
        with self.lock:
            old = node.parent
            if old is not None:
                old.remove_child(node)
            node._parent = weakref.ref(self)
            self.children.append(node)

    def remove_child(self, node: "Node") -> None:
        with self.lock:
            if node in self.children:
                node._parent = None
                self.children.remove(node)

    def traverse(self):
        """Генератор DFS."""
        yield self
        for child in self.children:
            yield from child.traverse()

    # ----------------- компоненты -----------------
    def add_component(self, component: Component) -> None:
        with self.lock:
            self.components[type(component)] = component

    def get_component(self, cls: Type[C]) -> Optional[C]:
        return self.components.get(cls)

    def has_component(self, cls: Type[Component]) -> bool:
        return cls in self.components

    def remove_component(self, cls: Type[Component]) -> Optional[Component]:
        with self.lock:
            return self.components.pop(cls, None)

    def find_node_by_component(self, cls: Type[Component]) -> Optional["Node"]:
        for node in self.traverse():
            if node.has_component(cls):
                return node
        return None

    def find_node_by_id(self, uid) -> Optional["Node"]:
        for node in self.traverse():
            if node.uid == uid:
                return node
        return None

    # ----------------- трансформации -----------------
    def get_local_matrix(self) -> Mat4:
        t = self.get_component(TransformComponent)
        return t.get_local_matrix() if t is not None else Mat4.identity()

    def set_local_matrix(self, m: Mat4) -> None:
        t = self.get_component(TransformComponent)
        if t is None:
            self.add_component(TransformComponent(m))
        else:
            with self.lock:
                t.set_local_matrix(m)

    def get_world_matrix(self) -> Mat4:
        """Рекурсивный обход к родителю."""
        parent = self.parent
        if parent is None:
            return self.get_local_matrix()
        return parent.get_world_matrix() @ self.get_local_matrix()

    def __repr__(self):
        kinds = ", ".join(c.__name__ for c in self.components)
        return f"Node({self.name!r}, [{kinds}], children={len(self.children)})"
