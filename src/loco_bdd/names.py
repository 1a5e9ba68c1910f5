"""Reserved names and identifier rules.

The names defined here form part of the public expression contract:
they are injected into every scenario-scoped evaluation and may be
relied upon by step plugins and feature authors.
"""

from re import ASCII
from re import compile as regexp

#: Base pattern for all variable identifiers.
NAME_PATTERN = r'[a-zA-Z][\w]*'

#: Compiled pattern for variable identifiers.
VARIABLE_PATTERN = regexp(
    rf'^(?P<name>{NAME_PATTERN})$',
    flags=ASCII,
)

#: Bridge object exposing host capabilities to expressions.
BRIDGE_NAME = 'loco'

#: Optional read function configured on the script environment.
READ_NAME = 'read'

#: Current item during iteration or mapping.
SELF_NAME = '_'

#: Root value during nested evaluation.
ROOT_NAME = '_root'

#: Parent value during nested evaluation.
PARENT_NAME = '_parent'

#: Marker character stripped from tag names.
TAG_MARKER = '@'
