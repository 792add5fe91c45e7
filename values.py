"""
tinysexp Value Model
Tagged runtime objects shared by the reader and the evaluator
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import List, Mapping


class SObject:
  """Generic runtime object; every value carries exactly one type tag"""

  type_name = "object"

  @property
  def type(self) -> 'SType':
    return BUILTIN_TYPES[self.type_name]

  def to_string(self) -> str:
    return f"SObject({self.type.name})"

  def __str__(self) -> str:
    return self.to_string()


@dataclass(frozen=True)
class SType(SObject):
  """Named type descriptor, used only as a tag carrier"""
  name: str

  type_name = "type"

  def to_string(self) -> str:
    return f"SType({self.name})"


@dataclass(frozen=True)
class SName(SObject):
  name: str

  type_name = "name"

  def to_string(self) -> str:
    return self.name


@dataclass(frozen=True)
class SString(SObject):
  value: str

  type_name = "string"

  def to_string(self) -> str:
    return self.value


@dataclass(frozen=True)
class SInt(SObject):
  value: int

  type_name = "int"

  def to_string(self) -> str:
    return str(self.value)


@dataclass
class SList(SObject):
  """Ordered sequence of child values, owned exclusively by this list"""
  items: List[SObject] = field(default_factory=list)

  type_name = "list"

  def add(self, obj: SObject) -> None:
    self.items.append(obj)

  def to_string(self) -> str:
    return print_form(self)

  def __len__(self) -> int:
    return len(self.items)

  def __repr__(self) -> str:
    return f"SList({print_form(self)})"


# ============================================================================
# TYPE TAGS
# ============================================================================

BUILTIN_TYPES: Mapping[str, SType] = MappingProxyType({
    name: SType(name)
    for name in ("object", "type", "name", "string", "int", "list")
})

OBJECT_TYPE = BUILTIN_TYPES["object"]
TYPE_TYPE = BUILTIN_TYPES["type"]
NAME_TYPE = BUILTIN_TYPES["name"]
STRING_TYPE = BUILTIN_TYPES["string"]
INT_TYPE = BUILTIN_TYPES["int"]
LIST_TYPE = BUILTIN_TYPES["list"]


# ============================================================================
# HELPERS
# ============================================================================

def is_atom(value: SObject) -> bool:
  """Everything except a list is an atom"""
  return not isinstance(value, SList)


def print_form(value: SObject) -> str:
  """
  Render a value back to source text.

  Lists are walked with an explicit stack, so arbitrarily deep trees
  render without hitting the interpreter's recursion limit.

  Examples:
    print_form(SInt(42)) -> "42"
    print_form(SList([SName("+"), SInt(1), SInt(2)])) -> "(+ 1 2)"
  """
  parts = []
  pending = [value]

  while pending:
    item = pending.pop()
    if isinstance(item, str):
      parts.append(item)
    elif isinstance(item, SList):
      pending.append(")")
      for index in reversed(range(len(item.items))):
        pending.append(item.items[index])
        if index:
          pending.append(" ")
      pending.append("(")
    else:
      parts.append(item.to_string())

  return "".join(parts)


def pretty_print_tree(value: SObject, indent: int = 0) -> str:
  """Pretty print a value tree for debugging, one node per line"""
  result = "  " * indent
  if isinstance(value, SList):
    result += f"List[{len(value.items)}]\n"
    for child in value.items:
      result += pretty_print_tree(child, indent + 1)
    return result

  return result + f"{value.type.name.capitalize()}({value.to_string()})\n"


def tree_depth(value: SObject) -> int:
  """Maximum list nesting depth of a tree (atoms have depth 0)"""
  depth = 0
  frontier = [(value, 0)]
  while frontier:
    node, level = frontier.pop()
    if isinstance(node, SList):
      level += 1
      depth = max(depth, level)
      frontier.extend((child, level) for child in node.items)
  return depth
